from __future__ import annotations

from dataclasses import replace

import structlog

from babyfoot.game.common.constants import PLAYERS_PER_TEAM
from babyfoot.game.tournaments.constants import (
    TOURNAMENT_MIN_TEAMS,
    TOURNAMENT_STATUS_IN_PROGRESS,
    TOURNAMENT_STATUS_TEAM_SETUP,
)
from babyfoot.game.tournaments.errors import InvalidTournamentTeamsError, TournamentClosedError
from babyfoot.game.tournaments.internal import ensure_host, mutate_tournament
from babyfoot.game.tournaments.schedule import generate_schedule
from babyfoot.game.tournaments.teams import teams_cover_roster
from babyfoot.game.tournaments.types import Tournament
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


def apply_start(tournament: Tournament, *, actor_user_id: str | None = None) -> Tournament:
    ensure_host(tournament, actor_user_id)
    if tournament.status != TOURNAMENT_STATUS_TEAM_SETUP:
        raise TournamentClosedError
    teams_total = len(tournament.teams)
    if teams_total < TOURNAMENT_MIN_TEAMS or teams_total > tournament.max_teams:
        raise InvalidTournamentTeamsError
    if not teams_cover_roster(
        tournament.players,
        tournament.teams,
        team_size=PLAYERS_PER_TEAM[tournament.format],
    ):
        raise InvalidTournamentTeamsError
    return generate_schedule(replace(tournament, status=TOURNAMENT_STATUS_IN_PROGRESS))


async def start_tournament(
    store: DocumentStore,
    *,
    tournament_id: str,
    actor_user_id: str | None = None,
) -> Tournament:
    tournament = await mutate_tournament(
        store,
        tournament_id=tournament_id,
        transition=lambda current: apply_start(current, actor_user_id=actor_user_id),
    )
    logger.info(
        "tournament_started",
        tournament_id=tournament_id,
        mode=tournament.mode,
        teams_total=len(tournament.teams),
        matches_total=len(tournament.matches),
    )
    return tournament
