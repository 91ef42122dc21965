from __future__ import annotations

from datetime import datetime

import structlog

from babyfoot.core.errors import BabyfootError
from babyfoot.game.common.constants import (
    COLLECTION_GAMES,
    COLLECTION_TOURNAMENTS,
    TARGET_SCORE_SHORT,
)
from babyfoot.game.common.teams import partition_roster
from babyfoot.game.games.create import build_team, create_game
from babyfoot.game.games.types import Game
from babyfoot.game.sessions.internal import mutate_session
from babyfoot.game.sessions.lifecycle import apply_activate, ensure_host, ensure_startable
from babyfoot.game.sessions.queries import get_session
from babyfoot.game.sessions.types import GameSession, TeamAssignment
from babyfoot.game.tournaments.create_join import create_tournament_from_roster
from babyfoot.game.tournaments.types import Tournament
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


async def _load_startable(
    store: DocumentStore,
    *,
    session_id: str,
    now_utc: datetime,
    actor_user_id: str | None,
) -> GameSession:
    game_session = await get_session(store, session_id=session_id)
    ensure_host(game_session, actor_user_id)
    ensure_startable(game_session, now_utc=now_utc)
    return game_session


async def start_session(
    store: DocumentStore,
    *,
    session_id: str,
    assignment: TeamAssignment,
    now_utc: datetime,
    target_score: int = TARGET_SCORE_SHORT,
    actor_user_id: str | None = None,
) -> Game:
    """Hands a full lobby over to a new game.

    The game is written first and the session then flips to ``active`` through
    a compare-and-swap. If the session moved meanwhile (cancelled, expired,
    already started) the orphan game is deleted and the error re-raised.
    """
    game_session = await _load_startable(
        store,
        session_id=session_id,
        now_utc=now_utc,
        actor_user_id=actor_user_id,
    )
    groups = partition_roster(
        game_session.players,
        assignment.teams,
        team_size=game_session.max_players // 2,
        teams_total=2,
    )
    game = await create_game(
        store,
        teams=[
            build_team(players, color=color)
            for players, color in zip(groups, assignment.colors)
        ],
        venue_ref=game_session.venue_ref,
        target_score=target_score,
        now_utc=now_utc,
        session_ref=session_id,
    )
    try:
        await mutate_session(
            store,
            session_id=session_id,
            transition=lambda current: apply_activate(
                current,
                now_utc=now_utc,
                actor_user_id=actor_user_id,
                game_ref=game.game_id,
            ),
        )
    except BabyfootError:
        await store.delete(COLLECTION_GAMES, game.game_id)
        raise
    logger.info("session_started", session_id=session_id, game_id=game.game_id)
    return game


async def start_tournament_from_session(
    store: DocumentStore,
    *,
    session_id: str,
    mode: str,
    target_score: int,
    now_utc: datetime,
    name: str | None = None,
    actor_user_id: str | None = None,
) -> Tournament:
    game_session = await _load_startable(
        store,
        session_id=session_id,
        now_utc=now_utc,
        actor_user_id=actor_user_id,
    )
    tournament = await create_tournament_from_roster(
        store,
        host_id=game_session.host_id,
        players=game_session.players,
        venue_ref=game_session.venue_ref,
        format_code=game_session.format,
        mode=mode,
        target_score=target_score,
        now_utc=now_utc,
        session_ref=session_id,
        name=name,
    )
    try:
        await mutate_session(
            store,
            session_id=session_id,
            transition=lambda current: apply_activate(
                current,
                now_utc=now_utc,
                actor_user_id=actor_user_id,
                tournament_ref=tournament.tournament_id,
            ),
        )
    except BabyfootError:
        await store.delete(COLLECTION_TOURNAMENTS, tournament.tournament_id)
        raise
    logger.info(
        "session_started_tournament",
        session_id=session_id,
        tournament_id=tournament.tournament_id,
    )
    return tournament
