from __future__ import annotations

from babyfoot.workers.asyncio_runner import run_async_job
from babyfoot.workers.celery_app import celery_app
from babyfoot.workers.tasks.session_expiry_async import (
    run_session_expiry_sweep_async as _run_session_expiry_sweep_async,
)
from babyfoot.workers.tasks.session_expiry_config import EXPIRY_BATCH_SIZE
from babyfoot.workers.tasks.session_expiry_schedule import configure_session_expiry_schedule

run_session_expiry_sweep_async = _run_session_expiry_sweep_async

__all__ = ["run_session_expiry_sweep", "run_session_expiry_sweep_async"]


@celery_app.task(name="babyfoot.workers.tasks.session_expiry.run_session_expiry_sweep")
def run_session_expiry_sweep(batch_size: int = EXPIRY_BATCH_SIZE) -> dict[str, int]:
    return run_async_job(run_session_expiry_sweep_async(batch_size=batch_size))


configure_session_expiry_schedule(celery_app)
