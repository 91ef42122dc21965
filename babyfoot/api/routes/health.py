from __future__ import annotations

import asyncio
from typing import Any

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from babyfoot.api.deps import get_store
from babyfoot.core.errors import StoreUnavailableError
from babyfoot.game.common.constants import COLLECTION_SESSIONS
from babyfoot.game.sessions.constants import SESSION_STATUS_WAITING
from babyfoot.store.base import DocumentStore
from babyfoot.store.brokers import RedisSnapshotBroker
from babyfoot.workers.celery_app import celery_app
from babyfoot.workers.tasks.session_expiry import run_session_expiry_sweep

router = APIRouter(tags=["health"])
logger = structlog.get_logger(__name__)


def _ok_check(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"status": "ok"}
    if extra:
        payload.update(extra)
    return payload


def _failed_check(error: str) -> dict[str, str]:
    return {"status": "failed", "error": error}


async def _check_store(store: DocumentStore) -> dict[str, Any]:
    try:
        await store.query(COLLECTION_SESSIONS, "status", "==", SESSION_STATUS_WAITING, limit=1)
        return _ok_check()
    except StoreUnavailableError as exc:
        logger.warning("health_store_failed", error_type=type(exc).__name__)
        return _failed_check("store_unavailable")


async def _check_snapshot_broker(store: DocumentStore) -> dict[str, Any]:
    broker = store.broker
    backend = "redis" if isinstance(broker, RedisSnapshotBroker) else "local"
    try:
        if not await broker.ping():
            return _failed_check("broker_unexpected_ping")
        return _ok_check({"backend": backend})
    except StoreUnavailableError as exc:
        logger.warning("health_broker_failed", backend=backend, error_type=type(exc).__name__)
        return _failed_check("broker_unavailable")


def _check_expiry_sweep_sync() -> dict[str, Any]:
    try:
        inspector = celery_app.control.inspect(timeout=1.0)
        if inspector is None:
            return _failed_check("celery_unavailable")
        registered = inspector.registered() or {}
        if not registered:
            return _failed_check("celery_no_workers")
        workers = [name for name, tasks in registered.items() if run_session_expiry_sweep.name in (tasks or [])]
        if not workers:
            return _failed_check("celery_sweep_not_registered")
        return _ok_check({"workers": len(workers)})
    except Exception as exc:
        logger.warning("health_celery_failed", error_type=type(exc).__name__)
        return _failed_check("celery_unavailable")


async def _check_expiry_sweep() -> dict[str, Any]:
    return await asyncio.to_thread(_check_expiry_sweep_sync)


def _all_checks_ok(checks: dict[str, dict[str, Any]]) -> bool:
    return all(check.get("status") == "ok" for check in checks.values())


@router.get("/health")
async def health(store: DocumentStore = Depends(get_store)) -> JSONResponse:
    store_check, broker_check, sweep_check = await asyncio.gather(
        _check_store(store),
        _check_snapshot_broker(store),
        _check_expiry_sweep(),
    )
    checks = {"store": store_check, "snapshot_broker": broker_check, "session_expiry": sweep_check}
    is_healthy = _all_checks_ok(checks)
    return JSONResponse(
        status_code=status.HTTP_200_OK if is_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ok" if is_healthy else "degraded", "checks": checks},
    )


@router.get("/ready")
async def ready(store: DocumentStore = Depends(get_store)) -> JSONResponse:
    # Workers only run the expiry sweep; the API can serve without them.
    store_check, broker_check = await asyncio.gather(_check_store(store), _check_snapshot_broker(store))
    checks = {"store": store_check, "snapshot_broker": broker_check}
    is_ready = _all_checks_ok(checks)
    return JSONResponse(
        status_code=status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ready" if is_ready else "not_ready", "checks": checks},
    )


@router.get("/live")
async def live() -> dict[str, str]:
    return {"status": "live"}
