from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from babyfoot.store.brokers import SnapshotBroker

Document = dict[str, Any]
SnapshotCallback = Callable[[Document | None], Awaitable[None]]

QUERY_OP_EQ = "=="
QUERY_OP_IN = "in"
QUERY_OPS = frozenset({QUERY_OP_EQ, QUERY_OP_IN})


class StoreVersionConflictError(Exception):
    """Raised by ``update`` when the stored version moved since it was read."""


class DocumentAlreadyExistsError(Exception):
    pass


class DocumentMissingError(Exception):
    pass


@dataclass(frozen=True, slots=True)
class StoredDocument:
    collection: str
    doc_id: str
    version: int
    data: Document


class Subscription:
    """Cancellation handle returned by ``subscribe``; ``cancel`` is idempotent."""

    def __init__(self, on_cancel: Callable[[], Awaitable[None]] | None = None) -> None:
        self._on_cancel = on_cancel
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            await self._on_cancel()


class DocumentStore(Protocol):
    @property
    def broker(self) -> SnapshotBroker: ...

    async def get(self, collection: str, doc_id: str) -> StoredDocument | None: ...

    async def create(self, collection: str, doc_id: str, data: Document) -> StoredDocument: ...

    async def update(
        self,
        collection: str,
        doc_id: str,
        data: Document,
        *,
        expected_version: int,
    ) -> StoredDocument: ...

    async def delete(self, collection: str, doc_id: str) -> bool: ...

    async def query(
        self,
        collection: str,
        field: str,
        op: str,
        value: Any,
        *,
        limit: int | None = None,
    ) -> list[StoredDocument]: ...

    async def subscribe(
        self,
        collection: str,
        doc_id: str,
        callback: SnapshotCallback,
    ) -> Subscription: ...


def matches_query(data: Document, *, field: str, op: str, value: Any) -> bool:
    if op not in QUERY_OPS:
        raise ValueError(f"unsupported query op: {op}")
    current = data.get(field)
    if op == QUERY_OP_EQ:
        return current == value
    return current in tuple(value)
