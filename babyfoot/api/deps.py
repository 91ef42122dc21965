from __future__ import annotations

from datetime import datetime, timezone

from fastapi import Depends, Header

from babyfoot.game.games.service_facade import GameEngine
from babyfoot.game.sessions.service_facade import SessionManager
from babyfoot.game.tournaments.service_facade import TournamentScheduler
from babyfoot.store.base import DocumentStore
from babyfoot.store.factory import get_document_store


def get_store() -> DocumentStore:
    return get_document_store()


def get_now_utc() -> datetime:
    return datetime.now(timezone.utc)


def get_actor_user_id(x_actor_id: str | None = Header(default=None, alias="X-Actor-Id")) -> str | None:
    if x_actor_id is None:
        return None
    return x_actor_id.strip() or None


def get_session_manager(store: DocumentStore = Depends(get_store)) -> SessionManager:
    return SessionManager(store)


def get_game_engine(store: DocumentStore = Depends(get_store)) -> GameEngine:
    return GameEngine(store)


def get_tournament_scheduler(store: DocumentStore = Depends(get_store)) -> TournamentScheduler:
    return TournamentScheduler(store)
