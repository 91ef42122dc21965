from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import structlog

from babyfoot.game.common.constants import COLLECTION_GAMES, TARGET_SCORES, TEAM_COLORS
from babyfoot.game.common.errors import InvalidTargetScoreError
from babyfoot.game.common.types import Player
from babyfoot.game.games.constants import GAME_STATUS_IN_PROGRESS, GAME_WIN_MARGIN
from babyfoot.game.games.errors import InvalidGameSetupError
from babyfoot.game.games.internal import game_to_document, new_game_id
from babyfoot.game.games.types import Game, GameTeam
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


def build_team(
    players: Sequence[Player],
    *,
    color: str,
    name: str | None = None,
) -> GameTeam:
    return GameTeam(players=tuple(players), color=color, score=0, name=name)


def validate_game_teams(teams: Sequence[GameTeam]) -> tuple[GameTeam, GameTeam]:
    if len(teams) != 2:
        raise InvalidGameSetupError
    first, second = teams
    if not first.players or not second.players:
        raise InvalidGameSetupError
    if first.color == second.color or first.color not in TEAM_COLORS or second.color not in TEAM_COLORS:
        raise InvalidGameSetupError
    user_ids = [player.user_id for team in teams for player in team.players]
    if len(set(user_ids)) != len(user_ids):
        raise InvalidGameSetupError
    return (
        GameTeam(players=first.players, color=first.color, score=0, name=first.name),
        GameTeam(players=second.players, color=second.color, score=0, name=second.name),
    )


async def create_game(
    store: DocumentStore,
    *,
    teams: Sequence[GameTeam],
    venue_ref: str,
    target_score: int,
    now_utc: datetime,
    session_ref: str | None = None,
    tournament_ref: str | None = None,
    tournament_match_ref: str | None = None,
    win_margin: int = GAME_WIN_MARGIN,
    game_id: str | None = None,
) -> Game:
    if target_score not in TARGET_SCORES:
        raise InvalidTargetScoreError
    game = Game(
        game_id=game_id or new_game_id(),
        venue_ref=venue_ref,
        teams=validate_game_teams(teams),
        goals=(),
        target_score=int(target_score),
        win_margin=max(1, int(win_margin)),
        status=GAME_STATUS_IN_PROGRESS,
        started_at=now_utc,
        session_ref=session_ref,
        tournament_ref=tournament_ref,
        tournament_match_ref=tournament_match_ref,
    )
    await store.create(COLLECTION_GAMES, game.game_id, game_to_document(game))
    logger.info(
        "game_created",
        game_id=game.game_id,
        session_ref=session_ref,
        tournament_ref=tournament_ref,
        target_score=game.target_score,
    )
    return game
