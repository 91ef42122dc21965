from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from babyfoot.game.tournaments.constants import (
    MATCH_STATUS_COMPLETED,
    TOURNAMENT_POINTS_DRAW,
    TOURNAMENT_POINTS_LOSS,
    TOURNAMENT_POINTS_WIN,
)
from babyfoot.game.tournaments.types import Standing, TournamentMatch, TournamentTeam


@dataclass(frozen=True, slots=True)
class PointsTable:
    win: int = TOURNAMENT_POINTS_WIN
    draw: int = TOURNAMENT_POINTS_DRAW
    loss: int = TOURNAMENT_POINTS_LOSS


DEFAULT_POINTS_TABLE = PointsTable()


@dataclass(slots=True)
class _StandingAccumulator:
    team_id: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0

    def record(self, *, scored: int, conceded: int, outcome: str, points_table: PointsTable) -> None:
        self.played += 1
        self.goals_for += scored
        self.goals_against += conceded
        if outcome == "win":
            self.wins += 1
            self.points += points_table.win
        elif outcome == "loss":
            self.losses += 1
            self.points += points_table.loss
        else:
            self.draws += 1
            self.points += points_table.draw

    def freeze(self) -> Standing:
        return Standing(
            team_id=self.team_id,
            played=self.played,
            wins=self.wins,
            draws=self.draws,
            losses=self.losses,
            goals_for=self.goals_for,
            goals_against=self.goals_against,
            points=self.points,
        )


def _outcome(match: TournamentMatch, team_id: str) -> str:
    if match.winner_team_id is None:
        return "draw"
    return "win" if match.winner_team_id == team_id else "loss"


def _standing_sort_key(standing: Standing, registration_index: dict[str, int]) -> tuple[int, int, int, int]:
    return (
        -standing.points,
        -standing.goal_difference,
        -standing.goals_for,
        registration_index.get(standing.team_id, len(registration_index)),
    )


def compute_standings(
    teams: Iterable[TournamentTeam],
    matches: Iterable[TournamentMatch],
    *,
    points_table: PointsTable = DEFAULT_POINTS_TABLE,
) -> tuple[Standing, ...]:
    """Rebuilds the table from completed matches only; byes never count as played."""
    ordered_teams = list(teams)
    registration_index = {team.team_id: index for index, team in enumerate(ordered_teams)}
    table = {team.team_id: _StandingAccumulator(team_id=team.team_id) for team in ordered_teams}

    for match in matches:
        if match.status != MATCH_STATUS_COMPLETED or match.score is None or match.team2_ref is None:
            continue
        first = table.get(match.team1_ref)
        second = table.get(match.team2_ref)
        if first is None or second is None:
            continue
        first.record(
            scored=match.score[0],
            conceded=match.score[1],
            outcome=_outcome(match, match.team1_ref),
            points_table=points_table,
        )
        second.record(
            scored=match.score[1],
            conceded=match.score[0],
            outcome=_outcome(match, match.team2_ref),
            points_table=points_table,
        )

    standings = [item.freeze() for item in table.values()]
    standings.sort(key=lambda item: _standing_sort_key(item, registration_index))
    return tuple(standings)
