from __future__ import annotations

from datetime import datetime

import structlog

from babyfoot.core.errors import ConcurrentModificationError
from babyfoot.game.common.constants import COLLECTION_SESSIONS
from babyfoot.game.sessions.constants import (
    SESSION_EXPIRY_SCAN_FACTOR,
    SESSION_JOINABLE_STATUSES,
    SESSION_STATUS_EXPIRED,
)
from babyfoot.game.sessions.errors import SessionNotFoundError
from babyfoot.game.sessions.internal import mutate_session, session_from_document
from babyfoot.game.sessions.lifecycle import apply_cancel, apply_expire
from babyfoot.game.sessions.types import GameSession
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


async def cancel_session(
    store: DocumentStore,
    *,
    session_id: str,
    now_utc: datetime,
    actor_user_id: str | None = None,
) -> GameSession:
    game_session = await mutate_session(
        store,
        session_id=session_id,
        transition=lambda current: apply_cancel(
            current,
            now_utc=now_utc,
            actor_user_id=actor_user_id,
        ),
    )
    logger.info("session_cancelled", session_id=session_id)
    return game_session


async def expire_session(store: DocumentStore, *, session_id: str, now_utc: datetime) -> GameSession:
    return await mutate_session(
        store,
        session_id=session_id,
        transition=lambda current: apply_expire(current, now_utc=now_utc),
    )


async def expire_due_sessions(
    store: DocumentStore,
    *,
    now_utc: datetime,
    batch_size: int,
) -> dict[str, int]:
    resolved_batch_size = max(1, int(batch_size))
    rows = await store.query(
        COLLECTION_SESSIONS,
        "status",
        "in",
        tuple(sorted(SESSION_JOINABLE_STATUSES)),
        limit=resolved_batch_size * SESSION_EXPIRY_SCAN_FACTOR,
    )
    due = [
        game_session
        for game_session in (session_from_document(row.data) for row in rows)
        if game_session.is_past_expiry(now_utc)
    ]
    due.sort(key=lambda item: item.expires_at)

    result = {"due_total": len(due), "expired_total": 0, "skipped_total": 0}
    for game_session in due[:resolved_batch_size]:
        try:
            updated = await expire_session(
                store,
                session_id=game_session.session_id,
                now_utc=now_utc,
            )
        except (ConcurrentModificationError, SessionNotFoundError):
            result["skipped_total"] += 1
            logger.warning("session_expiry_skipped", session_id=game_session.session_id)
            continue
        if updated.status != SESSION_STATUS_EXPIRED:
            result["skipped_total"] += 1
            continue
        result["expired_total"] += 1
    return result
