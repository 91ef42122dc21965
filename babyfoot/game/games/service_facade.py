from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime

from babyfoot.game.games.service import (
    abandon_game,
    create_game,
    end_game,
    forfeit_game,
    get_game,
    get_game_results,
    record_goal,
    retract_last_goal,
    subscribe_to_game,
)
from babyfoot.game.games.types import Game, GameResults, GameTeam
from babyfoot.store.base import DocumentStore, Subscription


class GameEngine:
    """Facade for live game APIs bound to one document store."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def create_game(
        self,
        *,
        teams: Sequence[GameTeam],
        venue_ref: str,
        target_score: int,
        now_utc: datetime,
        session_ref: str | None = None,
        tournament_ref: str | None = None,
        tournament_match_ref: str | None = None,
    ) -> Game:
        return await create_game(
            self.store,
            teams=teams,
            venue_ref=venue_ref,
            target_score=target_score,
            now_utc=now_utc,
            session_ref=session_ref,
            tournament_ref=tournament_ref,
            tournament_match_ref=tournament_match_ref,
        )

    async def record_goal(
        self,
        *,
        game_id: str,
        team_index: int,
        scorer_id: str,
        position: str,
        goal_type: str,
        now_utc: datetime,
        scorer_name: str | None = None,
        goal_id: str | None = None,
    ) -> Game:
        return await record_goal(
            self.store,
            game_id=game_id,
            team_index=team_index,
            scorer_id=scorer_id,
            position=position,
            goal_type=goal_type,
            now_utc=now_utc,
            scorer_name=scorer_name,
            goal_id=goal_id,
        )

    async def retract_last_goal(self, *, game_id: str) -> Game:
        return await retract_last_goal(self.store, game_id=game_id)

    async def end_game(self, *, game_id: str, now_utc: datetime) -> Game:
        return await end_game(self.store, game_id=game_id, now_utc=now_utc)

    async def forfeit_game(
        self,
        *,
        game_id: str,
        forfeiting_team_index: int,
        now_utc: datetime,
    ) -> Game:
        return await forfeit_game(
            self.store,
            game_id=game_id,
            forfeiting_team_index=forfeiting_team_index,
            now_utc=now_utc,
        )

    async def abandon_game(self, *, game_id: str, now_utc: datetime) -> Game:
        return await abandon_game(self.store, game_id=game_id, now_utc=now_utc)

    async def get_game(self, *, game_id: str) -> Game:
        return await get_game(self.store, game_id=game_id)

    async def get_game_results(self, *, game_id: str) -> GameResults:
        return await get_game_results(self.store, game_id=game_id)

    async def subscribe(
        self,
        *,
        game_id: str,
        callback: Callable[[Game | None], Awaitable[None]],
    ) -> Subscription:
        return await subscribe_to_game(self.store, game_id=game_id, callback=callback)
