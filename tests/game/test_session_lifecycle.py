from __future__ import annotations

from datetime import timedelta

import pytest

from babyfoot.game.sessions.constants import (
    SESSION_STATUS_ACTIVE,
    SESSION_STATUS_CANCELLED,
    SESSION_STATUS_EXPIRED,
    SESSION_STATUS_READY,
    SESSION_STATUS_WAITING,
)
from babyfoot.game.sessions.errors import (
    SessionAccessError,
    SessionClosedError,
    SessionExpiredError,
    SessionFullError,
    SessionNotReadyError,
)
from babyfoot.game.sessions.lifecycle import (
    apply_activate,
    apply_cancel,
    apply_expire,
    apply_join,
)
from babyfoot.game.sessions.types import GameSession
from tests.game.babyfoot_fixtures import NOW_UTC, VENUE_REF, _player


def _session(*, format_code: str = "2v2", players=("host",), status: str = SESSION_STATUS_WAITING) -> GameSession:
    return GameSession(
        session_id="session-1",
        pin_code="ABC-123",
        format=format_code,
        venue_ref=VENUE_REF,
        host_id="host",
        players=tuple(_player(user_id) for user_id in players),
        status=status,
        created_at=NOW_UTC,
        expires_at=NOW_UTC + timedelta(minutes=5),
    )


def test_join_appends_in_order_and_flags_ready_when_full() -> None:
    game_session = _session()
    for user_id in ("p2", "p3"):
        game_session = apply_join(game_session, player=_player(user_id), now_utc=NOW_UTC)
        assert game_session.status == SESSION_STATUS_WAITING

    game_session = apply_join(game_session, player=_player("p4"), now_utc=NOW_UTC)
    assert game_session.status == SESSION_STATUS_READY
    assert [player.user_id for player in game_session.players] == ["host", "p2", "p3", "p4"]


def test_join_is_idempotent_for_present_player() -> None:
    game_session = _session(format_code="1v1", players=("host", "p2"), status=SESSION_STATUS_READY)
    assert apply_join(game_session, player=_player("p2"), now_utc=NOW_UTC) is None


def test_join_rejects_full_session() -> None:
    game_session = _session(format_code="1v1", players=("host", "p2"), status=SESSION_STATUS_READY)
    with pytest.raises(SessionFullError):
        apply_join(game_session, player=_player("p3"), now_utc=NOW_UTC)


def test_join_enforces_expiry_even_when_status_is_stale() -> None:
    game_session = _session()
    with pytest.raises(SessionExpiredError):
        apply_join(game_session, player=_player("p2"), now_utc=NOW_UTC + timedelta(minutes=6))


def test_join_rejects_terminal_sessions() -> None:
    with pytest.raises(SessionExpiredError):
        apply_join(_session(status=SESSION_STATUS_EXPIRED), player=_player("p2"), now_utc=NOW_UTC)
    for status in (SESSION_STATUS_ACTIVE, SESSION_STATUS_CANCELLED):
        with pytest.raises(SessionClosedError):
            apply_join(_session(status=status), player=_player("p2"), now_utc=NOW_UTC)


def test_activate_requires_ready_and_host() -> None:
    with pytest.raises(SessionNotReadyError):
        apply_activate(_session(), now_utc=NOW_UTC)

    ready = _session(format_code="1v1", players=("host", "p2"), status=SESSION_STATUS_READY)
    with pytest.raises(SessionAccessError):
        apply_activate(ready, now_utc=NOW_UTC, actor_user_id="p2")

    active = apply_activate(ready, now_utc=NOW_UTC, actor_user_id="host", game_ref="game-1")
    assert active.status == SESSION_STATUS_ACTIVE
    assert active.game_ref == "game-1"
    assert active.closed_at == NOW_UTC


def test_activate_rejects_ready_session_past_expiry() -> None:
    ready = _session(format_code="1v1", players=("host", "p2"), status=SESSION_STATUS_READY)
    with pytest.raises(SessionExpiredError):
        apply_activate(ready, now_utc=NOW_UTC + timedelta(minutes=10))


def test_cancel_is_idempotent_and_host_only() -> None:
    game_session = _session()
    with pytest.raises(SessionAccessError):
        apply_cancel(game_session, now_utc=NOW_UTC, actor_user_id="intruder")

    cancelled = apply_cancel(game_session, now_utc=NOW_UTC)
    assert cancelled.status == SESSION_STATUS_CANCELLED
    assert apply_cancel(cancelled, now_utc=NOW_UTC) is None

    with pytest.raises(SessionClosedError):
        apply_cancel(_session(status=SESSION_STATUS_ACTIVE), now_utc=NOW_UTC)


def test_expire_only_flips_open_sessions_past_ttl() -> None:
    assert apply_expire(_session(), now_utc=NOW_UTC) is None
    assert apply_expire(_session(status=SESSION_STATUS_ACTIVE), now_utc=NOW_UTC + timedelta(hours=1)) is None

    expired = apply_expire(_session(), now_utc=NOW_UTC + timedelta(minutes=6))
    assert expired.status == SESSION_STATUS_EXPIRED
