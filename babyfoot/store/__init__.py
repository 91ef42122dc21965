from babyfoot.store.base import (
    DocumentStore,
    StoredDocument,
    StoreVersionConflictError,
    Subscription,
)
from babyfoot.store.brokers import LocalSnapshotBroker, RedisSnapshotBroker, SnapshotBroker
from babyfoot.store.memory import InMemoryDocumentStore
from babyfoot.store.transactions import mutate_document

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "LocalSnapshotBroker",
    "RedisSnapshotBroker",
    "SnapshotBroker",
    "StoreVersionConflictError",
    "StoredDocument",
    "Subscription",
    "mutate_document",
]
