from __future__ import annotations

from collections.abc import Awaitable, Callable

from babyfoot.game.common.constants import COLLECTION_GAMES
from babyfoot.game.games.errors import GameNotFoundError
from babyfoot.game.games.internal import game_from_document
from babyfoot.game.games.scoring import compute_results
from babyfoot.game.games.types import Game, GameResults
from babyfoot.store.base import Document, DocumentStore, Subscription


async def get_game(store: DocumentStore, *, game_id: str) -> Game:
    stored = await store.get(COLLECTION_GAMES, game_id)
    if stored is None:
        raise GameNotFoundError
    return game_from_document(stored.data)


async def get_game_results(store: DocumentStore, *, game_id: str) -> GameResults:
    return compute_results(await get_game(store, game_id=game_id))


async def subscribe_to_game(
    store: DocumentStore,
    *,
    game_id: str,
    callback: Callable[[Game | None], Awaitable[None]],
) -> Subscription:
    """Delivers a decoded snapshot on every write; ``None`` once the game is deleted."""

    async def _deliver(snapshot: Document | None) -> None:
        await callback(game_from_document(snapshot) if snapshot is not None else None)

    return await store.subscribe(COLLECTION_GAMES, game_id, _deliver)
