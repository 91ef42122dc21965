from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from babyfoot.game.common.types import Player
from babyfoot.game.tournaments.constants import (
    MATCH_STATUS_IN_PROGRESS,
    MATCH_STATUS_PENDING,
    MATCH_TERMINAL_STATUSES,
)


@dataclass(frozen=True, slots=True)
class TournamentTeam:
    team_id: str
    name: str
    players: tuple[Player, ...]
    color: str | None = None


@dataclass(frozen=True, slots=True)
class TeamDraft:
    user_ids: tuple[str, ...]
    name: str | None = None
    color: str | None = None


@dataclass(frozen=True, slots=True)
class TournamentMatch:
    match_id: str
    team1_ref: str
    team2_ref: str | None
    status: str
    match_number: int
    round: int | None = None
    game_ref: str | None = None
    score: tuple[int, int] | None = None
    winner_team_id: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in MATCH_TERMINAL_STATUSES

    @property
    def is_playable(self) -> bool:
        return self.status == MATCH_STATUS_PENDING and self.team2_ref is not None

    @property
    def is_in_progress(self) -> bool:
        return self.status == MATCH_STATUS_IN_PROGRESS

    def involves(self, team_id: str) -> bool:
        return team_id in (self.team1_ref, self.team2_ref)


@dataclass(frozen=True, slots=True)
class Standing:
    team_id: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against


@dataclass(frozen=True, slots=True)
class BracketRound:
    round_number: int
    round_name: str
    match_ids: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Tournament:
    tournament_id: str
    name: str
    host_id: str
    venue_ref: str
    format: str
    target_score: int
    mode: str
    players: tuple[Player, ...]
    teams: tuple[TournamentTeam, ...]
    pin_code: str
    status: str
    matches: tuple[TournamentMatch, ...]
    standings: tuple[Standing, ...]
    max_teams: int
    created_at: datetime
    expires_at: datetime
    bracket: tuple[BracketRound, ...] | None = None
    current_match_id: str | None = None
    session_ref: str | None = None

    def has_player(self, user_id: str) -> bool:
        return any(player.user_id == user_id for player in self.players)

    def find_team(self, team_id: str | None) -> TournamentTeam | None:
        for team in self.teams:
            if team.team_id == team_id:
                return team
        return None

    def find_match(self, match_id: str) -> TournamentMatch | None:
        for match in self.matches:
            if match.match_id == match_id:
                return match
        return None

    def team_index(self, team_id: str) -> int:
        for index, team in enumerate(self.teams):
            if team.team_id == team_id:
                return index
        return len(self.teams)
