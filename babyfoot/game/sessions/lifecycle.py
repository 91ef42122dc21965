"""Pure session transitions.

Each function validates against the latest stored snapshot and returns the
next snapshot, or ``None`` when the call is a no-op. Raising leaves the stored
document untouched.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from babyfoot.game.common.types import Player
from babyfoot.game.sessions.constants import (
    SESSION_JOINABLE_STATUSES,
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
from babyfoot.game.sessions.types import GameSession


def status_for_roster(game_session: GameSession, players: tuple[Player, ...]) -> str:
    if len(players) >= game_session.max_players:
        return SESSION_STATUS_READY
    return SESSION_STATUS_WAITING


def ensure_not_terminal(game_session: GameSession) -> None:
    if game_session.status == SESSION_STATUS_EXPIRED:
        raise SessionExpiredError
    if game_session.is_terminal:
        raise SessionClosedError


def ensure_host(game_session: GameSession, actor_user_id: str | None) -> None:
    if actor_user_id is not None and actor_user_id != game_session.host_id:
        raise SessionAccessError


def apply_join(game_session: GameSession, *, player: Player, now_utc: datetime) -> GameSession | None:
    if game_session.has_player(player.user_id):
        return None
    ensure_not_terminal(game_session)
    if game_session.is_full:
        raise SessionFullError
    if game_session.is_past_expiry(now_utc):
        raise SessionExpiredError
    players = game_session.players + (player,)
    return replace(
        game_session,
        players=players,
        status=status_for_roster(game_session, players),
    )


def ensure_startable(game_session: GameSession, *, now_utc: datetime) -> None:
    ensure_not_terminal(game_session)
    if game_session.is_past_expiry(now_utc):
        raise SessionExpiredError
    if game_session.status != SESSION_STATUS_READY:
        raise SessionNotReadyError


def apply_activate(
    game_session: GameSession,
    *,
    now_utc: datetime,
    actor_user_id: str | None = None,
    game_ref: str | None = None,
    tournament_ref: str | None = None,
) -> GameSession:
    ensure_host(game_session, actor_user_id)
    ensure_startable(game_session, now_utc=now_utc)
    return replace(
        game_session,
        status=SESSION_STATUS_ACTIVE,
        game_ref=game_ref,
        tournament_ref=tournament_ref,
        closed_at=now_utc,
    )


def apply_cancel(
    game_session: GameSession,
    *,
    now_utc: datetime,
    actor_user_id: str | None = None,
) -> GameSession | None:
    ensure_host(game_session, actor_user_id)
    if game_session.status == SESSION_STATUS_CANCELLED:
        return None
    ensure_not_terminal(game_session)
    return replace(game_session, status=SESSION_STATUS_CANCELLED, closed_at=now_utc)


def apply_expire(game_session: GameSession, *, now_utc: datetime) -> GameSession | None:
    if game_session.status not in SESSION_JOINABLE_STATUSES:
        return None
    if not game_session.is_past_expiry(now_utc):
        return None
    return replace(game_session, status=SESSION_STATUS_EXPIRED, closed_at=now_utc)
