from __future__ import annotations

from datetime import datetime

import structlog

from babyfoot.game.games.constants import GAME_STATUS_COMPLETED, GOAL_TYPE_GAMELLE
from babyfoot.game.games.internal import mutate_game, new_goal_id
from babyfoot.game.games.scoring import apply_goal, apply_retract
from babyfoot.game.games.types import Game
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


async def record_goal(
    store: DocumentStore,
    *,
    game_id: str,
    team_index: int,
    scorer_id: str,
    position: str,
    goal_type: str,
    now_utc: datetime,
    scorer_name: str | None = None,
    goal_id: str | None = None,
) -> Game:
    resolved_goal_id = goal_id or new_goal_id()
    game = await mutate_game(
        store,
        game_id=game_id,
        transition=lambda current: apply_goal(
            current,
            goal_id=resolved_goal_id,
            team_index=team_index,
            scorer_id=scorer_id,
            scorer_name=scorer_name,
            position=position,
            goal_type=goal_type,
            now_utc=now_utc,
        ),
    )
    if goal_type == GOAL_TYPE_GAMELLE:
        logger.info("gamelle_recorded", game_id=game_id, scorer_id=scorer_id, goal_id=resolved_goal_id)
    else:
        logger.info(
            "goal_recorded",
            game_id=game_id,
            goal_id=resolved_goal_id,
            team_index=team_index,
            scores=list(game.scores),
        )
    if game.status == GAME_STATUS_COMPLETED:
        logger.info(
            "game_completed",
            game_id=game_id,
            winner_team_index=game.winner_team_index,
            end_reason=game.end_reason,
        )
    return game


async def retract_last_goal(store: DocumentStore, *, game_id: str) -> Game:
    game = await mutate_game(store, game_id=game_id, transition=apply_retract)
    logger.info("goal_retracted", game_id=game_id, scores=list(game.scores), status=game.status)
    return game
