from __future__ import annotations

from datetime import datetime, timedelta

import structlog

from babyfoot.game.common.constants import COLLECTION_SESSIONS, FORMATS, PIN_CODE_MAX_ATTEMPTS
from babyfoot.game.common.errors import InvalidFormatError
from babyfoot.game.common.pin_allocation import allocate_pin_code
from babyfoot.game.common.types import Player
from babyfoot.game.sessions.constants import (
    SESSION_JOINABLE_STATUSES,
    SESSION_STATUS_WAITING,
    SESSION_TTL_SECONDS,
)
from babyfoot.game.sessions.internal import new_session_id, session_to_document
from babyfoot.game.sessions.types import GameSession
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


async def create_session(
    store: DocumentStore,
    *,
    host: Player,
    venue_ref: str,
    format_code: str,
    now_utc: datetime,
    ttl_seconds: int = SESSION_TTL_SECONDS,
) -> GameSession:
    if format_code not in FORMATS:
        raise InvalidFormatError
    pin_code = await allocate_pin_code(
        store,
        collection=COLLECTION_SESSIONS,
        active_statuses=SESSION_JOINABLE_STATUSES,
        now_utc=now_utc,
        max_attempts=PIN_CODE_MAX_ATTEMPTS,
    )
    game_session = GameSession(
        session_id=new_session_id(),
        pin_code=pin_code,
        format=format_code,
        venue_ref=venue_ref,
        host_id=host.user_id,
        players=(host,),
        status=SESSION_STATUS_WAITING,
        created_at=now_utc,
        expires_at=now_utc + timedelta(seconds=max(1, int(ttl_seconds))),
    )
    await store.create(COLLECTION_SESSIONS, game_session.session_id, session_to_document(game_session))
    logger.info(
        "session_created",
        session_id=game_session.session_id,
        host_id=host.user_id,
        format=format_code,
        venue_ref=venue_ref,
    )
    return game_session
