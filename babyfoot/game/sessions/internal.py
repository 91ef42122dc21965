from __future__ import annotations

from collections.abc import Callable
from typing import Any
from uuid import uuid4

from babyfoot.game.common.constants import COLLECTION_SESSIONS, STORE_MAX_CAS_ATTEMPTS
from babyfoot.game.common.documents import (
    decode_datetime,
    encode_datetime,
    players_from_document,
    players_to_document,
)
from babyfoot.game.sessions.errors import SessionNotFoundError
from babyfoot.game.sessions.types import GameSession
from babyfoot.store.base import DocumentStore
from babyfoot.store.transactions import mutate_document


def new_session_id() -> str:
    return uuid4().hex


def session_to_document(game_session: GameSession) -> dict[str, Any]:
    return {
        "session_id": game_session.session_id,
        "pin_code": game_session.pin_code,
        "format": game_session.format,
        "max_players": game_session.max_players,
        "venue_ref": game_session.venue_ref,
        "host_id": game_session.host_id,
        "players": players_to_document(game_session.players),
        "status": game_session.status,
        "created_at": encode_datetime(game_session.created_at),
        "expires_at": encode_datetime(game_session.expires_at),
        "game_ref": game_session.game_ref,
        "tournament_ref": game_session.tournament_ref,
        "closed_at": encode_datetime(game_session.closed_at),
    }


def session_from_document(data: dict[str, Any]) -> GameSession:
    return GameSession(
        session_id=str(data["session_id"]),
        pin_code=str(data["pin_code"]),
        format=str(data["format"]),
        venue_ref=str(data["venue_ref"]),
        host_id=str(data["host_id"]),
        players=players_from_document(data.get("players")),
        status=str(data["status"]),
        created_at=decode_datetime(data["created_at"]),
        expires_at=decode_datetime(data["expires_at"]),
        game_ref=data.get("game_ref"),
        tournament_ref=data.get("tournament_ref"),
        closed_at=decode_datetime(data.get("closed_at")),
    )


async def mutate_session(
    store: DocumentStore,
    *,
    session_id: str,
    transition: Callable[[GameSession], GameSession | None],
) -> GameSession:
    def _apply(data: dict[str, Any]) -> dict[str, Any] | None:
        next_session = transition(session_from_document(data))
        if next_session is None:
            return None
        return session_to_document(next_session)

    stored = await mutate_document(
        store,
        collection=COLLECTION_SESSIONS,
        doc_id=session_id,
        transition=_apply,
        max_attempts=STORE_MAX_CAS_ATTEMPTS,
        not_found=SessionNotFoundError,
    )
    return session_from_document(stored.data)
