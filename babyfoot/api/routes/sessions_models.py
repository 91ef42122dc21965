from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from babyfoot.api.routes.common_models import PlayerModel
from babyfoot.game.common.constants import DEFAULT_TEAM_COLORS, TARGET_SCORE_SHORT


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    session_id: str
    pin_code: str
    format: str
    max_players: int
    venue_ref: str
    host_id: str
    players: list[PlayerModel]
    status: str
    created_at: datetime
    expires_at: datetime
    game_ref: str | None
    tournament_ref: str | None
    closed_at: datetime | None
    join_link: str | None = None


class CreateSessionRequest(BaseModel):
    host: PlayerModel
    venue_ref: str = Field(min_length=1, max_length=128)
    format: str


class JoinSessionRequest(BaseModel):
    player: PlayerModel


class JoinSessionByPinRequest(BaseModel):
    pin_code: str = Field(min_length=1, max_length=32)
    player: PlayerModel


class StartSessionRequest(BaseModel):
    teams: tuple[list[str], list[str]]
    colors: tuple[str, str] = DEFAULT_TEAM_COLORS
    target_score: int = TARGET_SCORE_SHORT


class StartSessionTournamentRequest(BaseModel):
    mode: str
    target_score: int = TARGET_SCORE_SHORT
    name: str | None = Field(default=None, max_length=120)
