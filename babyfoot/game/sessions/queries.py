from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime

from babyfoot.core.config import get_settings
from babyfoot.core.pin_codes import build_join_link, canonical_pin_code
from babyfoot.game.common.constants import COLLECTION_SESSIONS
from babyfoot.game.sessions.constants import SESSION_JOINABLE_STATUSES
from babyfoot.game.sessions.errors import SessionNotFoundError
from babyfoot.game.sessions.internal import session_from_document
from babyfoot.game.sessions.types import GameSession
from babyfoot.store.base import Document, DocumentStore, Subscription


async def get_session(store: DocumentStore, *, session_id: str) -> GameSession:
    stored = await store.get(COLLECTION_SESSIONS, session_id)
    if stored is None:
        raise SessionNotFoundError
    return session_from_document(stored.data)


async def resolve_by_pin(
    store: DocumentStore,
    *,
    pin_code: str,
    now_utc: datetime,
) -> GameSession | None:
    """Finds the open lobby behind a typed PIN.

    Only ``waiting``/``ready`` sessions are considered. When a stale lobby
    still shares the PIN, the one that has not expired wins, then the newest.
    """
    canonical = canonical_pin_code(pin_code)
    if canonical is None:
        return None
    rows = await store.query(COLLECTION_SESSIONS, "pin_code", "==", canonical)
    candidates = [
        session_from_document(row.data)
        for row in rows
        if row.data.get("status") in SESSION_JOINABLE_STATUSES
    ]
    if not candidates:
        return None
    candidates.sort(
        key=lambda item: (not item.is_past_expiry(now_utc), item.created_at),
        reverse=True,
    )
    return candidates[0]


async def subscribe_to_session(
    store: DocumentStore,
    *,
    session_id: str,
    callback: Callable[[GameSession | None], Awaitable[None]],
) -> Subscription:
    async def _deliver(snapshot: Document | None) -> None:
        await callback(session_from_document(snapshot) if snapshot is not None else None)

    return await store.subscribe(COLLECTION_SESSIONS, session_id, _deliver)


def build_session_join_link(game_session: GameSession, *, base_url: str | None = None) -> str:
    return build_join_link(
        base_url=base_url or get_settings().public_base_url,
        session_id=game_session.session_id,
        pin_code=game_session.pin_code,
    )
