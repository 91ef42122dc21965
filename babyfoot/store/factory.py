from __future__ import annotations

from functools import lru_cache

from babyfoot.core.config import get_settings
from babyfoot.db.session import SessionLocal
from babyfoot.store.brokers import LocalSnapshotBroker, RedisSnapshotBroker, SnapshotBroker
from babyfoot.store.sql import SqlDocumentStore

SNAPSHOT_BROKER_REDIS = "redis"


def build_snapshot_broker() -> SnapshotBroker:
    settings = get_settings()
    if settings.snapshot_broker.strip().lower() == SNAPSHOT_BROKER_REDIS:
        return RedisSnapshotBroker.from_url(settings.redis_url)
    return LocalSnapshotBroker()


@lru_cache(maxsize=1)
def get_document_store() -> SqlDocumentStore:
    return SqlDocumentStore(SessionLocal, broker=build_snapshot_broker())


async def close_snapshot_broker(broker: SnapshotBroker) -> None:
    if isinstance(broker, RedisSnapshotBroker):
        await broker.aclose()


async def close_document_store() -> None:
    if get_document_store.cache_info().currsize == 0:
        return
    store = get_document_store()
    get_document_store.cache_clear()
    await close_snapshot_broker(store.broker)
