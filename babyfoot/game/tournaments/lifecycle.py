from __future__ import annotations

from dataclasses import replace

import structlog

from babyfoot.game.tournaments.constants import (
    TOURNAMENT_STATUS_CANCELLED,
    TOURNAMENT_STATUS_COMPLETED,
)
from babyfoot.game.tournaments.errors import TournamentClosedError
from babyfoot.game.tournaments.internal import ensure_host, mutate_tournament
from babyfoot.game.tournaments.types import Tournament
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


def apply_cancel(tournament: Tournament, *, actor_user_id: str | None = None) -> Tournament | None:
    ensure_host(tournament, actor_user_id)
    if tournament.status == TOURNAMENT_STATUS_CANCELLED:
        return None
    if tournament.status == TOURNAMENT_STATUS_COMPLETED:
        raise TournamentClosedError
    return replace(tournament, status=TOURNAMENT_STATUS_CANCELLED, current_match_id=None)


async def cancel_tournament(
    store: DocumentStore,
    *,
    tournament_id: str,
    actor_user_id: str | None = None,
) -> Tournament:
    tournament = await mutate_tournament(
        store,
        tournament_id=tournament_id,
        transition=lambda current: apply_cancel(current, actor_user_id=actor_user_id),
    )
    logger.info("tournament_cancelled", tournament_id=tournament_id)
    return tournament
