from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

import structlog

from babyfoot.game.common.constants import FORMAT_1V1, PLAYERS_PER_TEAM
from babyfoot.game.tournaments.constants import (
    TOURNAMENT_OPEN_STATUSES,
    TOURNAMENT_STATUS_TEAM_SETUP,
)
from babyfoot.game.tournaments.errors import InvalidTournamentTeamsError, TournamentClosedError
from babyfoot.game.tournaments.internal import ensure_host, mutate_tournament
from babyfoot.game.tournaments.teams import auto_assign_teams, form_teams
from babyfoot.game.tournaments.types import TeamDraft, Tournament
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


def apply_begin_team_setup(
    tournament: Tournament,
    *,
    actor_user_id: str | None = None,
) -> Tournament | None:
    ensure_host(tournament, actor_user_id)
    if tournament.status == TOURNAMENT_STATUS_TEAM_SETUP:
        return None
    if tournament.status not in TOURNAMENT_OPEN_STATUSES:
        raise TournamentClosedError
    teams = tournament.teams
    if tournament.format == FORMAT_1V1:
        teams = auto_assign_teams(tournament.players)
    return replace(tournament, status=TOURNAMENT_STATUS_TEAM_SETUP, teams=teams)


def apply_assign_teams(
    tournament: Tournament,
    *,
    drafts: Sequence[TeamDraft],
    actor_user_id: str | None = None,
) -> Tournament:
    ensure_host(tournament, actor_user_id)
    if tournament.status != TOURNAMENT_STATUS_TEAM_SETUP:
        raise TournamentClosedError
    if len(drafts) > tournament.max_teams:
        raise InvalidTournamentTeamsError
    teams = form_teams(
        tournament.players,
        team_size=PLAYERS_PER_TEAM[tournament.format],
        drafts=drafts,
    )
    return replace(tournament, teams=teams)


async def begin_team_setup(
    store: DocumentStore,
    *,
    tournament_id: str,
    actor_user_id: str | None = None,
) -> Tournament:
    tournament = await mutate_tournament(
        store,
        tournament_id=tournament_id,
        transition=lambda current: apply_begin_team_setup(current, actor_user_id=actor_user_id),
    )
    logger.info(
        "tournament_team_setup_started",
        tournament_id=tournament_id,
        teams_total=len(tournament.teams),
    )
    return tournament


async def assign_teams(
    store: DocumentStore,
    *,
    tournament_id: str,
    drafts: Sequence[TeamDraft],
    actor_user_id: str | None = None,
) -> Tournament:
    tournament = await mutate_tournament(
        store,
        tournament_id=tournament_id,
        transition=lambda current: apply_assign_teams(
            current,
            drafts=drafts,
            actor_user_id=actor_user_id,
        ),
    )
    logger.info("tournament_teams_assigned", tournament_id=tournament_id, teams_total=len(tournament.teams))
    return tournament
