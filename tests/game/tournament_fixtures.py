from __future__ import annotations

from datetime import timedelta

from babyfoot.game.tournaments.types import Tournament, TournamentTeam
from tests.game.babyfoot_fixtures import NOW_UTC, VENUE_REF, _player


def _teams(total: int) -> tuple[TournamentTeam, ...]:
    return tuple(
        TournamentTeam(
            team_id=f"t{index}",
            name=f"Team {index}",
            players=(_player(f"u{index}"),),
        )
        for index in range(total)
    )


def _tournament(*, teams_total: int, mode: str, status: str = "team_setup") -> Tournament:
    teams = _teams(teams_total)
    return Tournament(
        tournament_id="tournament-1",
        name="Friday cup",
        host_id="u0",
        venue_ref=VENUE_REF,
        format="1v1",
        target_score=6,
        mode=mode,
        players=tuple(player for team in teams for player in team.players),
        teams=teams,
        pin_code="CUP-001",
        status=status,
        matches=(),
        standings=(),
        max_teams=64,
        created_at=NOW_UTC,
        expires_at=NOW_UTC + timedelta(minutes=30),
    )
