from __future__ import annotations

from collections.abc import Sequence

from babyfoot.game.common.constants import TEAM_COLORS
from babyfoot.game.common.errors import InvalidTeamAssignmentError
from babyfoot.game.common.teams import partition_roster
from babyfoot.game.common.types import Player
from babyfoot.game.tournaments.internal import new_entity_id
from babyfoot.game.tournaments.types import TeamDraft, TournamentTeam


def default_team_name(players: Sequence[Player]) -> str:
    return " & ".join(player.username for player in players)


def auto_assign_teams(roster: Sequence[Player]) -> tuple[TournamentTeam, ...]:
    """One team per player, used by the 1v1 format."""
    return tuple(
        TournamentTeam(
            team_id=new_entity_id(),
            name=player.username,
            players=(player,),
        )
        for player in roster
    )


def form_teams(
    roster: Sequence[Player],
    *,
    team_size: int,
    drafts: Sequence[TeamDraft],
) -> tuple[TournamentTeam, ...]:
    groups = partition_roster(
        roster,
        [draft.user_ids for draft in drafts],
        team_size=team_size,
    )
    teams: list[TournamentTeam] = []
    for draft, players in zip(drafts, groups):
        if draft.color is not None and draft.color not in TEAM_COLORS:
            raise InvalidTeamAssignmentError
        name = (draft.name or "").strip() or default_team_name(players)
        teams.append(
            TournamentTeam(
                team_id=new_entity_id(),
                name=name,
                players=players,
                color=draft.color,
            )
        )
    return tuple(teams)


def teams_cover_roster(
    roster: Sequence[Player],
    teams: Sequence[TournamentTeam],
    *,
    team_size: int,
) -> bool:
    try:
        partition_roster(
            roster,
            [[player.user_id for player in team.players] for team in teams],
            team_size=team_size,
        )
    except InvalidTeamAssignmentError:
        return False
    return True
