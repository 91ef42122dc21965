from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from babyfoot.game.common.types import Player


@dataclass(frozen=True, slots=True)
class Goal:
    goal_id: str
    scorer_id: str
    scorer_name: str
    team_index: int
    position: str
    type: str
    points: int
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class GameTeam:
    players: tuple[Player, ...]
    color: str
    score: int = 0
    name: str | None = None

    def has_player(self, user_id: str) -> bool:
        return any(player.user_id == user_id for player in self.players)


@dataclass(frozen=True, slots=True)
class Game:
    game_id: str
    venue_ref: str
    teams: tuple[GameTeam, GameTeam]
    goals: tuple[Goal, ...]
    target_score: int
    win_margin: int
    status: str
    started_at: datetime
    session_ref: str | None = None
    tournament_ref: str | None = None
    tournament_match_ref: str | None = None
    ended_at: datetime | None = None
    duration_seconds: int | None = None
    winner_team_index: int | None = None
    end_reason: str | None = None

    @property
    def scores(self) -> tuple[int, int]:
        return self.teams[0].score, self.teams[1].score


@dataclass(slots=True)
class GameResults:
    game_id: str
    mvp: Player | None
    mvp_goals: int
    goals_by_player: dict[str, int] = field(default_factory=dict)
    goals_by_position: dict[str, int] = field(default_factory=dict)
    gamelles_by_player: dict[str, int] = field(default_factory=dict)
