from __future__ import annotations

from datetime import datetime, timezone

import structlog

from babyfoot.db.session import SessionLocal
from babyfoot.game.sessions.manage import expire_due_sessions
from babyfoot.store.base import DocumentStore
from babyfoot.store.factory import build_snapshot_broker, close_snapshot_broker
from babyfoot.store.sql import SqlDocumentStore
from babyfoot.workers.tasks.session_expiry_config import EXPIRY_BATCH_SIZE

logger = structlog.get_logger("babyfoot.workers.tasks.session_expiry")


async def sweep_expired_sessions(
    store: DocumentStore,
    *,
    now_utc: datetime,
    batch_size: int = EXPIRY_BATCH_SIZE,
) -> dict[str, int]:
    resolved_batch_size = max(1, int(batch_size))
    counters = await expire_due_sessions(store, now_utc=now_utc, batch_size=resolved_batch_size)
    result = {"batch_size": resolved_batch_size, **counters}
    logger.info("session_expiry_sweep_processed", **result)
    return result


async def run_session_expiry_sweep_async(*, batch_size: int = EXPIRY_BATCH_SIZE) -> dict[str, int]:
    broker = build_snapshot_broker()
    try:
        return await sweep_expired_sessions(
            SqlDocumentStore(SessionLocal, broker=broker),
            now_utc=datetime.now(timezone.utc),
            batch_size=batch_size,
        )
    finally:
        await close_snapshot_broker(broker)
