from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime

from babyfoot.game.common.constants import TARGET_SCORE_SHORT
from babyfoot.game.common.types import Player
from babyfoot.game.games.types import Game
from babyfoot.game.sessions.service import (
    build_session_join_link,
    cancel_session,
    create_session,
    get_session,
    join_session,
    join_session_by_pin,
    resolve_by_pin,
    start_session,
    start_tournament_from_session,
    subscribe_to_session,
)
from babyfoot.game.sessions.types import GameSession, TeamAssignment
from babyfoot.game.tournaments.types import Tournament
from babyfoot.store.base import DocumentStore, Subscription


class SessionManager:
    """Facade for lobby lifecycle APIs bound to one document store."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def create_session(
        self,
        *,
        host: Player,
        venue_ref: str,
        format_code: str,
        now_utc: datetime,
    ) -> GameSession:
        return await create_session(
            self.store,
            host=host,
            venue_ref=venue_ref,
            format_code=format_code,
            now_utc=now_utc,
        )

    async def join_session(self, *, session_id: str, player: Player, now_utc: datetime) -> GameSession:
        return await join_session(self.store, session_id=session_id, player=player, now_utc=now_utc)

    async def join_session_by_pin(self, *, pin_code: str, player: Player, now_utc: datetime) -> GameSession:
        return await join_session_by_pin(self.store, pin_code=pin_code, player=player, now_utc=now_utc)

    async def resolve_by_pin(self, *, pin_code: str, now_utc: datetime) -> GameSession | None:
        return await resolve_by_pin(self.store, pin_code=pin_code, now_utc=now_utc)

    async def get_session(self, *, session_id: str) -> GameSession:
        return await get_session(self.store, session_id=session_id)

    async def start(
        self,
        *,
        session_id: str,
        assignment: TeamAssignment,
        now_utc: datetime,
        target_score: int = TARGET_SCORE_SHORT,
        actor_user_id: str | None = None,
    ) -> Game:
        return await start_session(
            self.store,
            session_id=session_id,
            assignment=assignment,
            now_utc=now_utc,
            target_score=target_score,
            actor_user_id=actor_user_id,
        )

    async def start_tournament(
        self,
        *,
        session_id: str,
        mode: str,
        target_score: int,
        now_utc: datetime,
        name: str | None = None,
        actor_user_id: str | None = None,
    ) -> Tournament:
        return await start_tournament_from_session(
            self.store,
            session_id=session_id,
            mode=mode,
            target_score=target_score,
            now_utc=now_utc,
            name=name,
            actor_user_id=actor_user_id,
        )

    async def cancel(
        self,
        *,
        session_id: str,
        now_utc: datetime,
        actor_user_id: str | None = None,
    ) -> GameSession:
        return await cancel_session(
            self.store,
            session_id=session_id,
            now_utc=now_utc,
            actor_user_id=actor_user_id,
        )

    async def subscribe(
        self,
        *,
        session_id: str,
        callback: Callable[[GameSession | None], Awaitable[None]],
    ) -> Subscription:
        return await subscribe_to_session(self.store, session_id=session_id, callback=callback)

    @staticmethod
    def join_link(game_session: GameSession) -> str:
        return build_session_join_link(game_session)
