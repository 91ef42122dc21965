from __future__ import annotations

from babyfoot.game.tournaments.constants import (
    TOURNAMENT_MODE_BRACKET,
    TOURNAMENT_STATUS_COMPLETED,
)
from babyfoot.game.tournaments.schedule import round_matches
from babyfoot.game.tournaments.types import Tournament, TournamentTeam


def is_complete(tournament: Tournament) -> bool:
    if tournament.status == TOURNAMENT_STATUS_COMPLETED:
        return True
    if not tournament.matches:
        return False
    if not all(match.is_terminal for match in tournament.matches):
        return False
    if tournament.mode != TOURNAMENT_MODE_BRACKET:
        return True
    if not tournament.bracket:
        return False
    return len(round_matches(tournament, tournament.bracket[-1])) == 1


def champion(tournament: Tournament) -> TournamentTeam | None:
    if not is_complete(tournament):
        return None
    if tournament.mode == TOURNAMENT_MODE_BRACKET:
        final = round_matches(tournament, tournament.bracket[-1])[0]
        return tournament.find_team(final.winner_team_id)
    if not tournament.standings:
        return None
    return tournament.find_team(tournament.standings[0].team_id)
