from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime
from urllib.parse import urlencode

from babyfoot.core.config import get_settings
from babyfoot.core.pin_codes import canonical_pin_code
from babyfoot.game.common.constants import COLLECTION_TOURNAMENTS
from babyfoot.game.tournaments.constants import TOURNAMENT_OPEN_STATUSES
from babyfoot.game.tournaments.errors import TournamentNotFoundError
from babyfoot.game.tournaments.internal import tournament_from_document
from babyfoot.game.tournaments.types import Tournament
from babyfoot.store.base import Document, DocumentStore, Subscription


async def get_tournament(store: DocumentStore, *, tournament_id: str) -> Tournament:
    stored = await store.get(COLLECTION_TOURNAMENTS, tournament_id)
    if stored is None:
        raise TournamentNotFoundError
    return tournament_from_document(stored.data)


async def resolve_tournament_by_pin(
    store: DocumentStore,
    *,
    pin_code: str,
    now_utc: datetime,
) -> Tournament | None:
    canonical = canonical_pin_code(pin_code)
    if canonical is None:
        return None
    rows = await store.query(COLLECTION_TOURNAMENTS, "pin_code", "==", canonical)
    candidates = [
        tournament_from_document(row.data)
        for row in rows
        if row.data.get("status") in TOURNAMENT_OPEN_STATUSES
    ]
    if not candidates:
        return None
    candidates.sort(
        key=lambda item: (item.expires_at >= now_utc, item.created_at),
        reverse=True,
    )
    return candidates[0]


async def subscribe_to_tournament(
    store: DocumentStore,
    *,
    tournament_id: str,
    callback: Callable[[Tournament | None], Awaitable[None]],
) -> Subscription:
    async def _deliver(snapshot: Document | None) -> None:
        await callback(tournament_from_document(snapshot) if snapshot is not None else None)

    return await store.subscribe(COLLECTION_TOURNAMENTS, tournament_id, _deliver)


def build_tournament_join_link(tournament: Tournament, *, base_url: str | None = None) -> str:
    base = (base_url or get_settings().public_base_url).rstrip("/")
    query = urlencode({"code": tournament.pin_code, "tournament": tournament.tournament_id})
    return f"{base}/tournament/join?{query}"
