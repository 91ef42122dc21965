from __future__ import annotations

from datetime import datetime

import structlog

from babyfoot.game.common.types import Player
from babyfoot.game.sessions.errors import SessionNotFoundError
from babyfoot.game.sessions.internal import mutate_session
from babyfoot.game.sessions.lifecycle import apply_join
from babyfoot.game.sessions.queries import resolve_by_pin
from babyfoot.game.sessions.types import GameSession
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


async def join_session(
    store: DocumentStore,
    *,
    session_id: str,
    player: Player,
    now_utc: datetime,
) -> GameSession:
    game_session = await mutate_session(
        store,
        session_id=session_id,
        transition=lambda current: apply_join(current, player=player, now_utc=now_utc),
    )
    logger.info(
        "session_joined",
        session_id=session_id,
        user_id=player.user_id,
        players_total=len(game_session.players),
        status=game_session.status,
    )
    return game_session


async def join_session_by_pin(
    store: DocumentStore,
    *,
    pin_code: str,
    player: Player,
    now_utc: datetime,
) -> GameSession:
    game_session = await resolve_by_pin(store, pin_code=pin_code, now_utc=now_utc)
    if game_session is None:
        raise SessionNotFoundError
    return await join_session(
        store,
        session_id=game_session.session_id,
        player=player,
        now_utc=now_utc,
    )
