from __future__ import annotations

from datetime import datetime

import structlog

from babyfoot.game.games.internal import mutate_game
from babyfoot.game.games.scoring import apply_abandon, apply_end, apply_forfeit
from babyfoot.game.games.types import Game
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


async def end_game(store: DocumentStore, *, game_id: str, now_utc: datetime) -> Game:
    game = await mutate_game(
        store,
        game_id=game_id,
        transition=lambda current: apply_end(current, now_utc=now_utc),
    )
    logger.info(
        "game_ended_manually",
        game_id=game_id,
        winner_team_index=game.winner_team_index,
        scores=list(game.scores),
    )
    return game


async def forfeit_game(
    store: DocumentStore,
    *,
    game_id: str,
    forfeiting_team_index: int,
    now_utc: datetime,
) -> Game:
    game = await mutate_game(
        store,
        game_id=game_id,
        transition=lambda current: apply_forfeit(
            current,
            forfeiting_team_index=forfeiting_team_index,
            now_utc=now_utc,
        ),
    )
    logger.info(
        "game_forfeited",
        game_id=game_id,
        forfeiting_team_index=forfeiting_team_index,
    )
    return game


async def abandon_game(store: DocumentStore, *, game_id: str, now_utc: datetime) -> Game:
    game = await mutate_game(
        store,
        game_id=game_id,
        transition=lambda current: apply_abandon(current, now_utc=now_utc),
    )
    logger.info("game_abandoned", game_id=game_id)
    return game
