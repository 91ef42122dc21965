from __future__ import annotations

from babyfoot.workers.tasks.session_expiry_config import SCAN_INTERVAL_SECONDS


def configure_session_expiry_schedule(celery_app) -> None:
    celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
    celery_app.conf.beat_schedule.update(
        {
            "game-sessions-expiry-sweep": {
                "task": "babyfoot.workers.tasks.session_expiry.run_session_expiry_sweep",
                "schedule": float(SCAN_INTERVAL_SECONDS),
                "options": {"queue": "q_normal"},
            }
        }
    )
