from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends

from babyfoot.api.deps import get_game_engine, get_now_utc
from babyfoot.api.routes.games_models import (
    ForfeitRequest,
    GameResponse,
    GameResultsResponse,
    RecordGoalRequest,
)
from babyfoot.game.games.service_facade import GameEngine

router = APIRouter(prefix="/games", tags=["games"])


@router.get("/{game_id}", response_model=GameResponse)
async def get_game(game_id: str, engine: GameEngine = Depends(get_game_engine)) -> GameResponse:
    game = await engine.get_game(game_id=game_id)
    return GameResponse.model_validate(game)


@router.get("/{game_id}/results", response_model=GameResultsResponse)
async def get_game_results(
    game_id: str,
    engine: GameEngine = Depends(get_game_engine),
) -> GameResultsResponse:
    results = await engine.get_game_results(game_id=game_id)
    return GameResultsResponse.model_validate(results)


@router.post("/{game_id}/goals", response_model=GameResponse)
async def record_goal(
    game_id: str,
    payload: RecordGoalRequest,
    engine: GameEngine = Depends(get_game_engine),
    now_utc: datetime = Depends(get_now_utc),
) -> GameResponse:
    game = await engine.record_goal(
        game_id=game_id,
        team_index=payload.team_index,
        scorer_id=payload.scorer_id,
        scorer_name=payload.scorer_name,
        position=payload.position,
        goal_type=payload.type,
        goal_id=payload.goal_id,
        now_utc=now_utc,
    )
    return GameResponse.model_validate(game)


@router.delete("/{game_id}/goals/last", response_model=GameResponse)
async def retract_last_goal(game_id: str, engine: GameEngine = Depends(get_game_engine)) -> GameResponse:
    game = await engine.retract_last_goal(game_id=game_id)
    return GameResponse.model_validate(game)


@router.post("/{game_id}/end", response_model=GameResponse)
async def end_game(
    game_id: str,
    engine: GameEngine = Depends(get_game_engine),
    now_utc: datetime = Depends(get_now_utc),
) -> GameResponse:
    game = await engine.end_game(game_id=game_id, now_utc=now_utc)
    return GameResponse.model_validate(game)


@router.post("/{game_id}/forfeit", response_model=GameResponse)
async def forfeit_game(
    game_id: str,
    payload: ForfeitRequest,
    engine: GameEngine = Depends(get_game_engine),
    now_utc: datetime = Depends(get_now_utc),
) -> GameResponse:
    game = await engine.forfeit_game(
        game_id=game_id,
        forfeiting_team_index=payload.team_index,
        now_utc=now_utc,
    )
    return GameResponse.model_validate(game)


@router.post("/{game_id}/abandon", response_model=GameResponse)
async def abandon_game(
    game_id: str,
    engine: GameEngine = Depends(get_game_engine),
    now_utc: datetime = Depends(get_now_utc),
) -> GameResponse:
    game = await engine.abandon_game(game_id=game_id, now_utc=now_utc)
    return GameResponse.model_validate(game)
