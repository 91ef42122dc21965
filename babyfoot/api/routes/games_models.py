from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from babyfoot.api.routes.common_models import PlayerModel


class GoalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    goal_id: str
    scorer_id: str
    scorer_name: str
    team_index: int
    position: str
    type: str
    points: int
    timestamp: datetime


class GameTeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    players: list[PlayerModel]
    color: str
    score: int
    name: str | None = None


class GameResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    game_id: str
    venue_ref: str
    session_ref: str | None
    tournament_ref: str | None
    tournament_match_ref: str | None
    teams: list[GameTeamResponse]
    goals: list[GoalResponse]
    target_score: int
    win_margin: int
    status: str
    started_at: datetime
    ended_at: datetime | None
    duration_seconds: int | None
    winner_team_index: int | None
    end_reason: str | None


class GameResultsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    game_id: str
    mvp: PlayerModel | None
    mvp_goals: int
    goals_by_player: dict[str, int]
    goals_by_position: dict[str, int]
    gamelles_by_player: dict[str, int]


class RecordGoalRequest(BaseModel):
    team_index: int = Field(ge=0, le=1)
    scorer_id: str = Field(min_length=1)
    position: str
    type: str
    scorer_name: str | None = None
    goal_id: str | None = Field(default=None, min_length=1, max_length=64)


class ForfeitRequest(BaseModel):
    team_index: int = Field(ge=0, le=1)
