from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime

from babyfoot.game.common.types import Player
from babyfoot.game.games.types import Game
from babyfoot.game.tournaments.service import (
    add_guest_player,
    assign_teams,
    begin_team_setup,
    cancel_tournament,
    champion,
    complete_match_from_game,
    create_tournament,
    get_tournament,
    ingest_match_result,
    is_complete,
    join_tournament,
    join_tournament_by_pin,
    next_pending_match,
    remove_player,
    resolve_tournament_by_pin,
    start_match,
    start_tournament,
    subscribe_to_tournament,
)
from babyfoot.game.tournaments.types import (
    TeamDraft,
    Tournament,
    TournamentMatch,
    TournamentTeam,
)
from babyfoot.store.base import DocumentStore, Subscription


class TournamentScheduler:
    """Facade for tournament orchestration APIs bound to one document store."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def create_tournament(
        self,
        *,
        host: Player,
        venue_ref: str,
        format_code: str,
        mode: str,
        target_score: int,
        now_utc: datetime,
        name: str | None = None,
    ) -> Tournament:
        return await create_tournament(
            self.store,
            host=host,
            venue_ref=venue_ref,
            format_code=format_code,
            mode=mode,
            target_score=target_score,
            now_utc=now_utc,
            name=name,
        )

    async def get_tournament(self, *, tournament_id: str) -> Tournament:
        return await get_tournament(self.store, tournament_id=tournament_id)

    async def resolve_by_pin(self, *, pin_code: str, now_utc: datetime) -> Tournament | None:
        return await resolve_tournament_by_pin(self.store, pin_code=pin_code, now_utc=now_utc)

    async def join(self, *, tournament_id: str, player: Player, now_utc: datetime) -> Tournament:
        return await join_tournament(
            self.store,
            tournament_id=tournament_id,
            player=player,
            now_utc=now_utc,
        )

    async def join_by_pin(self, *, pin_code: str, player: Player, now_utc: datetime) -> Tournament:
        return await join_tournament_by_pin(
            self.store,
            pin_code=pin_code,
            player=player,
            now_utc=now_utc,
        )

    async def add_guest_player(
        self,
        *,
        tournament_id: str,
        guest_name: str,
        now_utc: datetime,
    ) -> Tournament:
        return await add_guest_player(
            self.store,
            tournament_id=tournament_id,
            guest_name=guest_name,
            now_utc=now_utc,
        )

    async def remove_player(
        self,
        *,
        tournament_id: str,
        user_id: str,
        actor_user_id: str | None = None,
    ) -> Tournament:
        return await remove_player(
            self.store,
            tournament_id=tournament_id,
            user_id=user_id,
            actor_user_id=actor_user_id,
        )

    async def begin_team_setup(
        self,
        *,
        tournament_id: str,
        actor_user_id: str | None = None,
    ) -> Tournament:
        return await begin_team_setup(
            self.store,
            tournament_id=tournament_id,
            actor_user_id=actor_user_id,
        )

    async def assign_teams(
        self,
        *,
        tournament_id: str,
        drafts: Sequence[TeamDraft],
        actor_user_id: str | None = None,
    ) -> Tournament:
        return await assign_teams(
            self.store,
            tournament_id=tournament_id,
            drafts=drafts,
            actor_user_id=actor_user_id,
        )

    async def start_tournament(
        self,
        *,
        tournament_id: str,
        actor_user_id: str | None = None,
    ) -> Tournament:
        return await start_tournament(
            self.store,
            tournament_id=tournament_id,
            actor_user_id=actor_user_id,
        )

    async def start_match(
        self,
        *,
        tournament_id: str,
        match_id: str,
        now_utc: datetime,
        actor_user_id: str | None = None,
    ) -> tuple[Tournament, Game]:
        return await start_match(
            self.store,
            tournament_id=tournament_id,
            match_id=match_id,
            now_utc=now_utc,
            actor_user_id=actor_user_id,
        )

    async def ingest_match_result(
        self,
        *,
        tournament_id: str,
        match_id: str,
        score: Sequence[int],
        winner_team_id: str | None = None,
    ) -> Tournament:
        return await ingest_match_result(
            self.store,
            tournament_id=tournament_id,
            match_id=match_id,
            score=score,
            winner_team_id=winner_team_id,
        )

    async def complete_match_from_game(self, *, game_id: str) -> Tournament:
        return await complete_match_from_game(self.store, game_id=game_id)

    async def cancel_tournament(
        self,
        *,
        tournament_id: str,
        actor_user_id: str | None = None,
    ) -> Tournament:
        return await cancel_tournament(
            self.store,
            tournament_id=tournament_id,
            actor_user_id=actor_user_id,
        )

    async def subscribe(
        self,
        *,
        tournament_id: str,
        callback: Callable[[Tournament | None], Awaitable[None]],
    ) -> Subscription:
        return await subscribe_to_tournament(
            self.store,
            tournament_id=tournament_id,
            callback=callback,
        )

    @staticmethod
    def next_pending_match(tournament: Tournament) -> TournamentMatch | None:
        return next_pending_match(tournament)

    @staticmethod
    def is_complete(tournament: Tournament) -> bool:
        return is_complete(tournament)

    @staticmethod
    def champion(tournament: Tournament) -> TournamentTeam | None:
        return champion(tournament)
