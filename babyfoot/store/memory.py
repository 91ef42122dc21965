from __future__ import annotations

import asyncio
import copy
from typing import Any

from babyfoot.store.base import (
    Document,
    DocumentAlreadyExistsError,
    DocumentMissingError,
    SnapshotCallback,
    StoredDocument,
    StoreVersionConflictError,
    Subscription,
    matches_query,
)
from babyfoot.store.brokers import LocalSnapshotBroker, SnapshotBroker


class InMemoryDocumentStore:
    """Versioned in-process document store.

    Every call yields to the event loop before touching state so concurrent
    callers interleave the way they would against a networked store.
    """

    def __init__(self, *, broker: SnapshotBroker | None = None) -> None:
        self._documents: dict[tuple[str, str], StoredDocument] = {}
        self._lock = asyncio.Lock()
        self._broker = broker or LocalSnapshotBroker()

    @property
    def broker(self) -> SnapshotBroker:
        return self._broker

    def __len__(self) -> int:
        return len(self._documents)

    async def get(self, collection: str, doc_id: str) -> StoredDocument | None:
        await asyncio.sleep(0)
        stored = self._documents.get((collection, doc_id))
        if stored is None:
            return None
        return _clone(stored)

    async def create(self, collection: str, doc_id: str, data: Document) -> StoredDocument:
        await asyncio.sleep(0)
        async with self._lock:
            key = (collection, doc_id)
            if key in self._documents:
                raise DocumentAlreadyExistsError(f"{collection}/{doc_id}")
            stored = StoredDocument(
                collection=collection,
                doc_id=doc_id,
                version=1,
                data=copy.deepcopy(data),
            )
            self._documents[key] = stored
        await self._broker.publish(collection, doc_id, copy.deepcopy(stored.data))
        return _clone(stored)

    async def update(
        self,
        collection: str,
        doc_id: str,
        data: Document,
        *,
        expected_version: int,
    ) -> StoredDocument:
        await asyncio.sleep(0)
        async with self._lock:
            key = (collection, doc_id)
            current = self._documents.get(key)
            if current is None:
                raise DocumentMissingError(f"{collection}/{doc_id}")
            if current.version != expected_version:
                raise StoreVersionConflictError(
                    f"{collection}/{doc_id}: expected v{expected_version}, found v{current.version}"
                )
            stored = StoredDocument(
                collection=collection,
                doc_id=doc_id,
                version=current.version + 1,
                data=copy.deepcopy(data),
            )
            self._documents[key] = stored
        await self._broker.publish(collection, doc_id, copy.deepcopy(stored.data))
        return _clone(stored)

    async def delete(self, collection: str, doc_id: str) -> bool:
        await asyncio.sleep(0)
        async with self._lock:
            removed = self._documents.pop((collection, doc_id), None)
        if removed is None:
            return False
        await self._broker.publish(collection, doc_id, None)
        return True

    async def query(
        self,
        collection: str,
        field: str,
        op: str,
        value: Any,
        *,
        limit: int | None = None,
    ) -> list[StoredDocument]:
        await asyncio.sleep(0)
        found: list[StoredDocument] = []
        for (stored_collection, _), stored in sorted(self._documents.items()):
            if stored_collection != collection:
                continue
            if not matches_query(stored.data, field=field, op=op, value=value):
                continue
            found.append(_clone(stored))
            if limit is not None and len(found) >= limit:
                break
        return found

    async def subscribe(
        self,
        collection: str,
        doc_id: str,
        callback: SnapshotCallback,
    ) -> Subscription:
        return await self._broker.subscribe(collection, doc_id, callback)


def _clone(stored: StoredDocument) -> StoredDocument:
    return StoredDocument(
        collection=stored.collection,
        doc_id=stored.doc_id,
        version=stored.version,
        data=copy.deepcopy(stored.data),
    )
