from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from babyfoot.api.routes.common_models import PlayerModel
from babyfoot.api.routes.games_models import GameResponse
from babyfoot.game.common.constants import TARGET_SCORE_SHORT
from babyfoot.game.tournaments.queries import build_tournament_join_link
from babyfoot.game.tournaments.service_facade import TournamentScheduler
from babyfoot.game.tournaments.types import Tournament


class TournamentTeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team_id: str
    name: str
    players: list[PlayerModel]
    color: str | None


class TournamentMatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    match_id: str
    game_ref: str | None
    team1_ref: str
    team2_ref: str | None
    status: str
    round: int | None
    match_number: int
    score: tuple[int, int] | None
    winner_team_id: str | None


class StandingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team_id: str
    played: int
    wins: int
    draws: int
    losses: int
    goals_for: int
    goals_against: int
    goal_difference: int
    points: int


class BracketRoundResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    round_number: int
    round_name: str
    match_ids: list[str]


class TournamentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tournament_id: str
    name: str
    host_id: str
    venue_ref: str
    format: str
    target_score: int
    mode: str
    players: list[PlayerModel]
    teams: list[TournamentTeamResponse]
    max_teams: int
    pin_code: str
    status: str
    matches: list[TournamentMatchResponse]
    standings: list[StandingResponse]
    bracket: list[BracketRoundResponse] | None
    current_match_id: str | None
    session_ref: str | None
    created_at: datetime
    expires_at: datetime
    is_complete: bool = False
    champion_team_id: str | None = None
    next_match_id: str | None = None
    join_link: str | None = None


class TournamentMatchStartResponse(BaseModel):
    tournament: TournamentResponse
    game: GameResponse


def build_tournament_response(tournament: Tournament) -> TournamentResponse:
    response = TournamentResponse.model_validate(tournament)
    champion = TournamentScheduler.champion(tournament)
    next_match = TournamentScheduler.next_pending_match(tournament)
    response.is_complete = TournamentScheduler.is_complete(tournament)
    response.champion_team_id = champion.team_id if champion is not None else None
    response.next_match_id = next_match.match_id if next_match is not None else None
    response.join_link = build_tournament_join_link(tournament)
    return response


class CreateTournamentRequest(BaseModel):
    host: PlayerModel
    venue_ref: str = Field(min_length=1, max_length=128)
    format: str
    mode: str
    target_score: int = TARGET_SCORE_SHORT
    name: str | None = Field(default=None, max_length=120)


class JoinTournamentRequest(BaseModel):
    player: PlayerModel


class JoinTournamentByPinRequest(BaseModel):
    pin_code: str = Field(min_length=1, max_length=32)
    player: PlayerModel


class AddGuestRequest(BaseModel):
    name: str = Field(min_length=1, max_length=64)


class TeamDraftModel(BaseModel):
    user_ids: list[str] = Field(min_length=1)
    name: str | None = Field(default=None, max_length=64)
    color: str | None = None


class AssignTeamsRequest(BaseModel):
    teams: list[TeamDraftModel] = Field(min_length=1)


class MatchResultRequest(BaseModel):
    score: tuple[int, int]
    winner_team_id: str | None = None
