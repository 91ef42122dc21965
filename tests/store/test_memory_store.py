from __future__ import annotations

import asyncio

import pytest

from babyfoot.core.errors import ConcurrentModificationError, NotFoundError
from babyfoot.store.base import DocumentAlreadyExistsError, StoreVersionConflictError
from babyfoot.store.brokers import LocalSnapshotBroker
from babyfoot.store.memory import InMemoryDocumentStore
from babyfoot.store.transactions import mutate_document


@pytest.mark.asyncio
async def test_create_then_update_bumps_version() -> None:
    store = InMemoryDocumentStore()
    created = await store.create("games", "g1", {"status": "in_progress"})
    assert created.version == 1

    updated = await store.update("games", "g1", {"status": "completed"}, expected_version=1)
    assert updated.version == 2
    stored = await store.get("games", "g1")
    assert stored is not None
    assert stored.data == {"status": "completed"}


@pytest.mark.asyncio
async def test_create_rejects_existing_id() -> None:
    store = InMemoryDocumentStore()
    await store.create("games", "g1", {})
    with pytest.raises(DocumentAlreadyExistsError):
        await store.create("games", "g1", {})


@pytest.mark.asyncio
async def test_update_with_stale_version_conflicts() -> None:
    store = InMemoryDocumentStore()
    await store.create("games", "g1", {"n": 1})
    await store.update("games", "g1", {"n": 2}, expected_version=1)
    with pytest.raises(StoreVersionConflictError):
        await store.update("games", "g1", {"n": 3}, expected_version=1)


@pytest.mark.asyncio
async def test_get_returns_a_copy() -> None:
    store = InMemoryDocumentStore()
    await store.create("games", "g1", {"goals": []})
    stored = await store.get("games", "g1")
    assert stored is not None
    stored.data["goals"].append("leak")

    again = await store.get("games", "g1")
    assert again is not None
    assert again.data == {"goals": []}


@pytest.mark.asyncio
async def test_query_supports_equality_and_membership() -> None:
    store = InMemoryDocumentStore()
    await store.create("game_sessions", "a", {"status": "waiting", "pin_code": "ABC-123"})
    await store.create("game_sessions", "b", {"status": "ready", "pin_code": "XYZ-987"})
    await store.create("game_sessions", "c", {"status": "cancelled", "pin_code": "ABC-123"})
    await store.create("games", "d", {"status": "waiting"})

    by_pin = await store.query("game_sessions", "pin_code", "==", "ABC-123")
    assert [item.doc_id for item in by_pin] == ["a", "c"]

    open_rows = await store.query("game_sessions", "status", "in", ("waiting", "ready"))
    assert [item.doc_id for item in open_rows] == ["a", "b"]

    limited = await store.query("game_sessions", "status", "in", ("waiting", "ready"), limit=1)
    assert len(limited) == 1

    with pytest.raises(ValueError):
        await store.query("game_sessions", "status", ">", "a")


@pytest.mark.asyncio
async def test_mutate_document_retries_after_conflict() -> None:
    store = InMemoryDocumentStore()
    await store.create("counters", "c1", {"value": 0})

    async def _increment() -> None:
        await mutate_document(
            store,
            collection="counters",
            doc_id="c1",
            transition=lambda data: {"value": data["value"] + 1},
            max_attempts=20,
        )

    await asyncio.gather(*(_increment() for _ in range(5)))

    stored = await store.get("counters", "c1")
    assert stored is not None
    assert stored.data == {"value": 5}
    assert stored.version == 6


@pytest.mark.asyncio
async def test_mutate_document_noop_keeps_version() -> None:
    store = InMemoryDocumentStore()
    await store.create("counters", "c1", {"value": 0})

    result = await mutate_document(
        store,
        collection="counters",
        doc_id="c1",
        transition=lambda data: None,
        max_attempts=3,
    )
    assert result.version == 1


@pytest.mark.asyncio
async def test_mutate_document_raises_not_found() -> None:
    store = InMemoryDocumentStore()
    with pytest.raises(NotFoundError):
        await mutate_document(
            store,
            collection="counters",
            doc_id="missing",
            transition=lambda data: data,
            max_attempts=3,
        )


@pytest.mark.asyncio
async def test_mutate_document_gives_up_after_max_attempts() -> None:
    store = InMemoryDocumentStore()
    await store.create("counters", "c1", {"value": 0})

    class _AlwaysStaleStore:
        def __init__(self) -> None:
            self.updates = 0

        async def get(self, collection, doc_id):
            return await store.get(collection, doc_id)

        async def update(self, collection, doc_id, data, *, expected_version):
            self.updates += 1
            raise StoreVersionConflictError("stale")

    stale = _AlwaysStaleStore()
    with pytest.raises(ConcurrentModificationError):
        await mutate_document(
            stale,
            collection="counters",
            doc_id="c1",
            transition=lambda data: {"value": data["value"] + 1},
            max_attempts=3,
        )
    assert stale.updates == 3


@pytest.mark.asyncio
async def test_subscribe_delivers_snapshots_until_cancelled() -> None:
    broker = LocalSnapshotBroker()
    store = InMemoryDocumentStore(broker=broker)
    received: list[dict | None] = []

    async def _callback(snapshot):
        received.append(snapshot)

    await store.create("games", "g1", {"n": 0})
    subscription = await store.subscribe("games", "g1", _callback)
    await store.update("games", "g1", {"n": 1}, expected_version=1)
    await store.create("games", "g2", {"n": 9})
    await store.delete("games", "g1")

    assert received == [{"n": 1}, None]

    await subscription.cancel()
    await subscription.cancel()
    assert subscription.cancelled
    assert broker.subscribers_total("games", "g1") == 0

    await store.create("games", "g1", {"n": 2})
    assert received == [{"n": 1}, None]


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_break_writes() -> None:
    store = InMemoryDocumentStore()
    delivered: list[dict | None] = []

    async def _broken(snapshot):
        raise RuntimeError("boom")

    async def _ok(snapshot):
        delivered.append(snapshot)

    await store.create("games", "g1", {"n": 0})
    await store.subscribe("games", "g1", _broken)
    await store.subscribe("games", "g1", _ok)

    updated = await store.update("games", "g1", {"n": 1}, expected_version=1)
    assert updated.version == 2
    assert delivered == [{"n": 1}]
