from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

import structlog

from babyfoot.core.errors import BabyfootError
from babyfoot.game.common.constants import COLLECTION_GAMES, DEFAULT_TEAM_COLORS
from babyfoot.game.games.constants import GAME_STATUS_ABANDONED, GAME_STATUS_COMPLETED
from babyfoot.game.games.create import build_team, create_game
from babyfoot.game.games.queries import get_game
from babyfoot.game.games.types import Game, GameTeam
from babyfoot.game.tournaments.constants import (
    MATCH_STATUS_COMPLETED,
    MATCH_STATUS_IN_PROGRESS,
    MATCH_STATUS_PENDING,
    TOURNAMENT_MODE_BRACKET,
    TOURNAMENT_STATUS_COMPLETED,
    TOURNAMENT_STATUS_IN_PROGRESS,
    TOURNAMENT_TERMINAL_STATUSES,
)
from babyfoot.game.tournaments.errors import (
    DrawNotAllowedError,
    InvalidMatchResultError,
    MatchAlreadyCompleteError,
    MatchGameNotFinishedError,
    MatchInProgressError,
    MatchNotActiveError,
    MatchNotFoundError,
    TournamentClosedError,
    TournamentNotStartedError,
)
from babyfoot.game.tournaments.internal import ensure_host, mutate_tournament
from babyfoot.game.tournaments.queries import get_tournament
from babyfoot.game.tournaments.schedule import advance_bracket, resolve_current_match_id
from babyfoot.game.tournaments.standings import DEFAULT_POINTS_TABLE, PointsTable, compute_standings
from babyfoot.game.tournaments.types import Tournament, TournamentMatch, TournamentTeam
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


def _ensure_running(tournament: Tournament) -> None:
    if tournament.status in TOURNAMENT_TERMINAL_STATUSES:
        raise TournamentClosedError
    if tournament.status != TOURNAMENT_STATUS_IN_PROGRESS:
        raise TournamentNotStartedError


def _require_match(tournament: Tournament, match_id: str) -> TournamentMatch:
    match = tournament.find_match(match_id)
    if match is None:
        raise MatchNotFoundError
    return match


def _with_match(tournament: Tournament, updated: TournamentMatch) -> Tournament:
    matches = tuple(
        updated if match.match_id == updated.match_id else match
        for match in tournament.matches
    )
    return replace(tournament, matches=matches)


def ensure_match_startable(tournament: Tournament, *, match_id: str) -> TournamentMatch:
    _ensure_running(tournament)
    match = _require_match(tournament, match_id)
    if match.is_terminal:
        raise MatchAlreadyCompleteError
    if any(item.is_in_progress for item in tournament.matches):
        raise MatchInProgressError
    if not match.is_playable:
        raise MatchNotActiveError
    return match


def apply_start_match(tournament: Tournament, *, match_id: str, game_ref: str) -> Tournament:
    match = ensure_match_startable(tournament, match_id=match_id)
    started = replace(match, status=MATCH_STATUS_IN_PROGRESS, game_ref=game_ref)
    return replace(_with_match(tournament, started), current_match_id=match_id)


def _validate_score(score: Sequence[int]) -> tuple[int, int]:
    if len(score) != 2:
        raise InvalidMatchResultError
    first, second = (int(value) for value in score)
    if first < 0 or second < 0:
        raise InvalidMatchResultError
    return first, second


def _resolve_winner(match: TournamentMatch, score: tuple[int, int], winner_team_id: str | None) -> str | None:
    if winner_team_id is not None:
        if winner_team_id not in (match.team1_ref, match.team2_ref):
            raise InvalidMatchResultError
        return winner_team_id
    if score[0] == score[1]:
        return None
    return match.team1_ref if score[0] > score[1] else match.team2_ref


def apply_match_result(
    tournament: Tournament,
    *,
    match_id: str,
    score: Sequence[int],
    winner_team_id: str | None = None,
    points_table: PointsTable = DEFAULT_POINTS_TABLE,
) -> Tournament:
    """Records a result for the in-progress match and re-derives everything downstream."""
    _ensure_running(tournament)
    match = _require_match(tournament, match_id)
    if match.is_terminal:
        raise MatchAlreadyCompleteError
    if match.status != MATCH_STATUS_IN_PROGRESS:
        raise MatchNotActiveError
    final_score = _validate_score(score)
    winner = _resolve_winner(match, final_score, winner_team_id)
    if winner is None and tournament.mode == TOURNAMENT_MODE_BRACKET:
        raise DrawNotAllowedError

    completed = replace(
        match,
        status=MATCH_STATUS_COMPLETED,
        score=final_score,
        winner_team_id=winner,
    )
    updated = _with_match(tournament, completed)
    updated = replace(
        updated,
        standings=compute_standings(updated.teams, updated.matches, points_table=points_table),
    )
    if updated.mode == TOURNAMENT_MODE_BRACKET:
        updated = advance_bracket(updated)
    elif all(item.is_terminal for item in updated.matches):
        updated = replace(updated, status=TOURNAMENT_STATUS_COMPLETED)

    if updated.status == TOURNAMENT_STATUS_COMPLETED:
        return replace(updated, current_match_id=None)
    return replace(updated, current_match_id=resolve_current_match_id(updated))


def apply_release_match(tournament: Tournament, *, match_id: str, game_ref: str) -> Tournament | None:
    match = tournament.find_match(match_id)
    if match is None or match.status != MATCH_STATUS_IN_PROGRESS or match.game_ref != game_ref:
        return None
    released = replace(match, status=MATCH_STATUS_PENDING, game_ref=None)
    updated = _with_match(tournament, released)
    return replace(updated, current_match_id=resolve_current_match_id(updated))


def build_match_game_teams(home: TournamentTeam, away: TournamentTeam) -> tuple[GameTeam, GameTeam]:
    home_color = home.color or DEFAULT_TEAM_COLORS[0]
    away_color = away.color or DEFAULT_TEAM_COLORS[1]
    if home_color == away_color:
        home_color, away_color = DEFAULT_TEAM_COLORS
    return (
        build_team(home.players, color=home_color, name=home.name),
        build_team(away.players, color=away_color, name=away.name),
    )


async def start_match(
    store: DocumentStore,
    *,
    tournament_id: str,
    match_id: str,
    now_utc: datetime,
    actor_user_id: str | None = None,
) -> tuple[Tournament, Game]:
    tournament = await get_tournament(store, tournament_id=tournament_id)
    ensure_host(tournament, actor_user_id)
    match = ensure_match_startable(tournament, match_id=match_id)
    home = tournament.find_team(match.team1_ref)
    away = tournament.find_team(match.team2_ref)
    if home is None or away is None:
        raise MatchNotActiveError

    game = await create_game(
        store,
        teams=build_match_game_teams(home, away),
        venue_ref=tournament.venue_ref,
        target_score=tournament.target_score,
        now_utc=now_utc,
        tournament_ref=tournament.tournament_id,
        tournament_match_ref=match.match_id,
    )
    try:
        tournament = await mutate_tournament(
            store,
            tournament_id=tournament_id,
            transition=lambda current: apply_start_match(
                current,
                match_id=match_id,
                game_ref=game.game_id,
            ),
        )
    except BabyfootError:
        await store.delete(COLLECTION_GAMES, game.game_id)
        raise
    logger.info(
        "tournament_match_started",
        tournament_id=tournament_id,
        match_id=match_id,
        game_id=game.game_id,
    )
    return tournament, game


async def ingest_match_result(
    store: DocumentStore,
    *,
    tournament_id: str,
    match_id: str,
    score: Sequence[int],
    winner_team_id: str | None = None,
) -> Tournament:
    tournament = await mutate_tournament(
        store,
        tournament_id=tournament_id,
        transition=lambda current: apply_match_result(
            current,
            match_id=match_id,
            score=score,
            winner_team_id=winner_team_id,
        ),
    )
    match = tournament.find_match(match_id)
    logger.info(
        "tournament_match_completed",
        tournament_id=tournament_id,
        match_id=match_id,
        score=list(match.score) if match is not None and match.score is not None else None,
        winner_team_id=match.winner_team_id if match is not None else None,
        tournament_status=tournament.status,
    )
    return tournament


async def complete_match_from_game(store: DocumentStore, *, game_id: str) -> Tournament:
    """Feeds a finished tournament game back into its match.

    Replaying the same game is a no-op. An abandoned game releases the match
    so it can be started again.
    """
    game = await get_game(store, game_id=game_id)
    if game.tournament_ref is None or game.tournament_match_ref is None:
        raise MatchNotFoundError
    tournament = await get_tournament(store, tournament_id=game.tournament_ref)
    match = _require_match(tournament, game.tournament_match_ref)

    if game.status == GAME_STATUS_ABANDONED:
        released = await mutate_tournament(
            store,
            tournament_id=tournament.tournament_id,
            transition=lambda current: apply_release_match(
                current,
                match_id=match.match_id,
                game_ref=game.game_id,
            ),
        )
        logger.info(
            "tournament_match_released",
            tournament_id=tournament.tournament_id,
            match_id=match.match_id,
            game_id=game.game_id,
        )
        return released
    if game.status != GAME_STATUS_COMPLETED:
        raise MatchGameNotFinishedError
    if match.status == MATCH_STATUS_COMPLETED and match.game_ref == game.game_id:
        return tournament

    winner_team_id = None
    if game.winner_team_index is not None:
        winner_team_id = (match.team1_ref, match.team2_ref)[game.winner_team_index]
    return await ingest_match_result(
        store,
        tournament_id=tournament.tournament_id,
        match_id=match.match_id,
        score=game.scores,
        winner_team_id=winner_team_id,
    )
