from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from babyfoot.db.session import SessionLocal
from babyfoot.game.games.constants import GAME_STATUS_COMPLETED
from babyfoot.game.games.service_facade import GameEngine
from babyfoot.game.sessions.service_facade import SessionManager
from babyfoot.game.sessions.types import TeamAssignment
from babyfoot.store.base import DocumentAlreadyExistsError, DocumentMissingError, StoreVersionConflictError
from babyfoot.store.sql import SqlDocumentStore
from babyfoot.store.transactions import mutate_document
from tests.game.babyfoot_fixtures import NOW_UTC, VENUE_REF, _player


def _sql_store() -> SqlDocumentStore:
    return SqlDocumentStore(SessionLocal)


@pytest.mark.asyncio
async def test_sql_store_versions_and_rejects_stale_writes() -> None:
    store = _sql_store()
    created = await store.create("games", "g-1", {"status": "in_progress", "scores": [0, 0]})
    assert created.version == 1

    with pytest.raises(DocumentAlreadyExistsError):
        await store.create("games", "g-1", {"status": "in_progress"})

    updated = await store.update("games", "g-1", {"status": "completed"}, expected_version=1)
    assert updated.version == 2

    with pytest.raises(StoreVersionConflictError):
        await store.update("games", "g-1", {"status": "abandoned"}, expected_version=1)
    with pytest.raises(DocumentMissingError):
        await store.update("games", "missing", {"status": "abandoned"}, expected_version=1)

    stored = await store.get("games", "g-1")
    assert stored is not None
    assert stored.version == 2
    assert stored.data == {"status": "completed"}

    assert await store.delete("games", "g-1") is True
    assert await store.get("games", "g-1") is None


@pytest.mark.asyncio
async def test_sql_store_queries_json_fields() -> None:
    store = _sql_store()
    await store.create("sessions", "s-1", {"pin_code": "ABC-123", "status": "waiting"})
    await store.create("sessions", "s-2", {"pin_code": "DEF-456", "status": "ready"})
    await store.create("sessions", "s-3", {"pin_code": "GHI-789", "status": "cancelled"})
    await store.create("games", "g-1", {"status": "waiting"})

    by_pin = await store.query("sessions", "pin_code", "==", "ABC-123")
    assert [row.doc_id for row in by_pin] == ["s-1"]

    joinable = await store.query("sessions", "status", "in", ("waiting", "ready"))
    assert [row.doc_id for row in joinable] == ["s-1", "s-2"]

    limited = await store.query("sessions", "status", "in", ("waiting", "ready"), limit=1)
    assert len(limited) == 1


@pytest.mark.asyncio
async def test_sql_store_concurrent_increments_all_land() -> None:
    store = _sql_store()
    await store.create("games", "counter", {"value": 0})

    async def _increment() -> None:
        await mutate_document(
            store,
            collection="games",
            doc_id="counter",
            transition=lambda data: {"value": data["value"] + 1},
            max_attempts=20,
        )

    await asyncio.gather(*(_increment() for _ in range(5)))

    stored = await store.get("games", "counter")
    assert stored is not None
    assert stored.data == {"value": 5}
    assert stored.version == 6


@pytest.mark.asyncio
async def test_lobby_to_completed_game_on_postgres() -> None:
    store = _sql_store()
    manager = SessionManager(store)
    engine = GameEngine(store)

    lobby = await manager.create_session(
        host=_player("alice"),
        venue_ref=VENUE_REF,
        format_code="1v1",
        now_utc=NOW_UTC,
    )
    await manager.join_session_by_pin(pin_code=lobby.pin_code, player=_player("bob"), now_utc=NOW_UTC)
    game = await manager.start(
        session_id=lobby.session_id,
        assignment=TeamAssignment(teams=(("alice",), ("bob",))),
        now_utc=NOW_UTC,
    )
    for n in range(6):
        game = await engine.record_goal(
            game_id=game.game_id,
            team_index=1,
            scorer_id="bob",
            position="attack",
            goal_type="normal",
            now_utc=NOW_UTC + timedelta(seconds=n + 1),
        )

    assert game.status == GAME_STATUS_COMPLETED
    assert await engine.get_game(game_id=game.game_id) == game
