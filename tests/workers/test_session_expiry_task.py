from __future__ import annotations

from datetime import timedelta

import pytest

from babyfoot.game.sessions.constants import SESSION_STATUS_EXPIRED, SESSION_STATUS_WAITING
from babyfoot.game.sessions.service_facade import SessionManager
from babyfoot.workers.celery_app import celery_app
from babyfoot.workers.tasks import session_expiry
from babyfoot.workers.tasks.session_expiry_async import sweep_expired_sessions
from tests.game.babyfoot_fixtures import NOW_UTC, VENUE_REF, _player, _store


def test_run_session_expiry_sweep_task_wrapper(monkeypatch) -> None:
    async def fake_async(*, batch_size: int) -> dict[str, int]:
        return {
            "batch_size": batch_size,
            "due_total": 4,
            "expired_total": 3,
            "skipped_total": 0,
        }

    monkeypatch.setattr(session_expiry, "run_session_expiry_sweep_async", fake_async)

    result = session_expiry.run_session_expiry_sweep(batch_size=3)
    assert result["batch_size"] == 3
    assert result["expired_total"] == 3


def test_session_expiry_sweep_is_scheduled_on_beat() -> None:
    entry = celery_app.conf.beat_schedule["game-sessions-expiry-sweep"]
    assert entry["task"] == "babyfoot.workers.tasks.session_expiry.run_session_expiry_sweep"
    assert entry["schedule"] >= 10
    assert entry["options"] == {"queue": "q_normal"}


@pytest.mark.asyncio
async def test_sweep_expires_only_stale_lobbies_in_batches() -> None:
    store = _store()
    manager = SessionManager(store)
    stale_ids = []
    for minute in range(3):
        game_session = await manager.create_session(
            host=_player(f"host{minute}"),
            venue_ref=VENUE_REF,
            format_code="1v1",
            now_utc=NOW_UTC + timedelta(minutes=minute),
        )
        stale_ids.append(game_session.session_id)
    fresh = await manager.create_session(
        host=_player("fresh"),
        venue_ref=VENUE_REF,
        format_code="1v1",
        now_utc=NOW_UTC + timedelta(hours=1),
    )

    sweep_at = NOW_UTC + timedelta(minutes=30)
    first = await sweep_expired_sessions(store, now_utc=sweep_at, batch_size=2)
    assert first == {"batch_size": 2, "due_total": 3, "expired_total": 2, "skipped_total": 0}

    second = await sweep_expired_sessions(store, now_utc=sweep_at, batch_size=0)
    assert second == {"batch_size": 1, "due_total": 1, "expired_total": 1, "skipped_total": 0}

    for session_id in stale_ids:
        stored = await manager.get_session(session_id=session_id)
        assert stored.status == SESSION_STATUS_EXPIRED
    untouched = await manager.get_session(session_id=fresh.session_id)
    assert untouched.status == SESSION_STATUS_WAITING
