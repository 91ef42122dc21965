from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timedelta

import structlog

from babyfoot.game.common.constants import (
    COLLECTION_TOURNAMENTS,
    FORMAT_1V1,
    FORMATS,
    GUEST_USER_ID_PREFIX,
    PIN_CODE_MAX_ATTEMPTS,
    PLAYERS_PER_TEAM,
    TARGET_SCORES,
)
from babyfoot.game.common.errors import InvalidFormatError, InvalidTargetScoreError
from babyfoot.game.common.pin_allocation import allocate_pin_code
from babyfoot.game.common.types import Player
from babyfoot.game.tournaments.constants import (
    MAX_TEAMS_BY_MODE,
    TOURNAMENT_JOIN_TTL_SECONDS,
    TOURNAMENT_MODES,
    TOURNAMENT_OPEN_STATUSES,
    TOURNAMENT_STATUS_TEAM_SETUP,
    TOURNAMENT_STATUS_WAITING,
)
from babyfoot.game.tournaments.errors import (
    HostRemovalError,
    InvalidTournamentModeError,
    TournamentClosedError,
    TournamentExpiredError,
    TournamentFullError,
    TournamentNotFoundError,
)
from babyfoot.game.tournaments.internal import (
    ensure_host,
    mutate_tournament,
    new_entity_id,
    tournament_to_document,
)
from babyfoot.game.tournaments.queries import resolve_tournament_by_pin
from babyfoot.game.tournaments.teams import auto_assign_teams
from babyfoot.game.tournaments.types import Tournament
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


def _validate_setup(*, format_code: str, mode: str, target_score: int) -> None:
    if format_code not in FORMATS:
        raise InvalidFormatError
    if mode not in TOURNAMENT_MODES:
        raise InvalidTournamentModeError
    if target_score not in TARGET_SCORES:
        raise InvalidTargetScoreError


def max_players_for(tournament: Tournament) -> int:
    return tournament.max_teams * PLAYERS_PER_TEAM[tournament.format]


async def _insert_tournament(
    store: DocumentStore,
    *,
    host_id: str,
    players: tuple[Player, ...],
    venue_ref: str,
    format_code: str,
    mode: str,
    target_score: int,
    now_utc: datetime,
    status: str,
    name: str,
    session_ref: str | None = None,
) -> Tournament:
    _validate_setup(format_code=format_code, mode=mode, target_score=target_score)
    pin_code = await allocate_pin_code(
        store,
        collection=COLLECTION_TOURNAMENTS,
        active_statuses=TOURNAMENT_OPEN_STATUSES,
        now_utc=now_utc,
        max_attempts=PIN_CODE_MAX_ATTEMPTS,
    )
    teams = ()
    if status == TOURNAMENT_STATUS_TEAM_SETUP and format_code == FORMAT_1V1:
        teams = auto_assign_teams(players)
    tournament = Tournament(
        tournament_id=new_entity_id(),
        name=name,
        host_id=host_id,
        venue_ref=venue_ref,
        format=format_code,
        target_score=int(target_score),
        mode=mode,
        players=players,
        teams=teams,
        pin_code=pin_code,
        status=status,
        matches=(),
        standings=(),
        max_teams=MAX_TEAMS_BY_MODE[mode],
        created_at=now_utc,
        expires_at=now_utc + timedelta(seconds=TOURNAMENT_JOIN_TTL_SECONDS),
        session_ref=session_ref,
    )
    await store.create(
        COLLECTION_TOURNAMENTS,
        tournament.tournament_id,
        tournament_to_document(tournament),
    )
    logger.info(
        "tournament_created",
        tournament_id=tournament.tournament_id,
        host_id=host_id,
        mode=mode,
        format=format_code,
        session_ref=session_ref,
    )
    return tournament


async def create_tournament(
    store: DocumentStore,
    *,
    host: Player,
    venue_ref: str,
    format_code: str,
    mode: str,
    target_score: int,
    now_utc: datetime,
    name: str | None = None,
) -> Tournament:
    return await _insert_tournament(
        store,
        host_id=host.user_id,
        players=(host,),
        venue_ref=venue_ref,
        format_code=format_code,
        mode=mode,
        target_score=target_score,
        now_utc=now_utc,
        status=TOURNAMENT_STATUS_WAITING,
        name=(name or "").strip() or f"{host.username}'s tournament",
    )


async def create_tournament_from_roster(
    store: DocumentStore,
    *,
    host_id: str,
    players: Sequence[Player],
    venue_ref: str,
    format_code: str,
    mode: str,
    target_score: int,
    now_utc: datetime,
    session_ref: str | None = None,
    name: str | None = None,
) -> Tournament:
    """Creates a tournament that skips the join phase and opens straight in team setup."""
    roster = tuple(players)
    host_name = next((player.username for player in roster if player.user_id == host_id), host_id)
    return await _insert_tournament(
        store,
        host_id=host_id,
        players=roster,
        venue_ref=venue_ref,
        format_code=format_code,
        mode=mode,
        target_score=target_score,
        now_utc=now_utc,
        status=TOURNAMENT_STATUS_TEAM_SETUP,
        name=(name or "").strip() or f"{host_name}'s tournament",
        session_ref=session_ref,
    )


def apply_join(tournament: Tournament, *, player: Player, now_utc: datetime) -> Tournament | None:
    if tournament.has_player(player.user_id):
        return None
    if tournament.status not in TOURNAMENT_OPEN_STATUSES:
        raise TournamentClosedError
    if now_utc > tournament.expires_at:
        raise TournamentExpiredError
    if len(tournament.players) >= max_players_for(tournament):
        raise TournamentFullError
    teams = tournament.teams
    if tournament.status == TOURNAMENT_STATUS_TEAM_SETUP and tournament.format == FORMAT_1V1:
        teams = teams + auto_assign_teams((player,))
    return replace(tournament, players=tournament.players + (player,), teams=teams)


def apply_remove_player(
    tournament: Tournament,
    *,
    user_id: str,
    actor_user_id: str | None = None,
) -> Tournament | None:
    ensure_host(tournament, actor_user_id)
    if user_id == tournament.host_id:
        raise HostRemovalError
    if not tournament.has_player(user_id):
        return None
    if tournament.status not in TOURNAMENT_OPEN_STATUSES:
        raise TournamentClosedError
    teams = tuple(
        replace(team, players=tuple(player for player in team.players if player.user_id != user_id))
        for team in tournament.teams
    )
    return replace(
        tournament,
        players=tuple(player for player in tournament.players if player.user_id != user_id),
        teams=tuple(team for team in teams if team.players),
    )


async def join_tournament(
    store: DocumentStore,
    *,
    tournament_id: str,
    player: Player,
    now_utc: datetime,
) -> Tournament:
    tournament = await mutate_tournament(
        store,
        tournament_id=tournament_id,
        transition=lambda current: apply_join(current, player=player, now_utc=now_utc),
    )
    logger.info(
        "tournament_joined",
        tournament_id=tournament_id,
        user_id=player.user_id,
        players_total=len(tournament.players),
    )
    return tournament


async def join_tournament_by_pin(
    store: DocumentStore,
    *,
    pin_code: str,
    player: Player,
    now_utc: datetime,
) -> Tournament:
    tournament = await resolve_tournament_by_pin(store, pin_code=pin_code, now_utc=now_utc)
    if tournament is None:
        raise TournamentNotFoundError
    return await join_tournament(
        store,
        tournament_id=tournament.tournament_id,
        player=player,
        now_utc=now_utc,
    )


async def add_guest_player(
    store: DocumentStore,
    *,
    tournament_id: str,
    guest_name: str,
    now_utc: datetime,
) -> Tournament:
    guest = Player(
        user_id=f"{GUEST_USER_ID_PREFIX}{new_entity_id()}",
        username=guest_name.strip() or "Guest",
    )
    return await join_tournament(
        store,
        tournament_id=tournament_id,
        player=guest,
        now_utc=now_utc,
    )


async def remove_player(
    store: DocumentStore,
    *,
    tournament_id: str,
    user_id: str,
    actor_user_id: str | None = None,
) -> Tournament:
    tournament = await mutate_tournament(
        store,
        tournament_id=tournament_id,
        transition=lambda current: apply_remove_player(
            current,
            user_id=user_id,
            actor_user_id=actor_user_id,
        ),
    )
    logger.info("tournament_player_removed", tournament_id=tournament_id, user_id=user_id)
    return tournament
