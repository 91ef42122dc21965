from __future__ import annotations

import asyncio
import json
from contextlib import suppress
from itertools import count
from typing import Protocol

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from babyfoot.core.errors import StoreUnavailableError
from babyfoot.store.base import Document, SnapshotCallback, Subscription

logger = structlog.get_logger(__name__)


class SnapshotBroker(Protocol):
    async def ping(self) -> bool: ...

    async def publish(self, collection: str, doc_id: str, snapshot: Document | None) -> None: ...

    async def subscribe(
        self,
        collection: str,
        doc_id: str,
        callback: SnapshotCallback,
    ) -> Subscription: ...


class LocalSnapshotBroker:
    """Fans snapshots out to callbacks registered in this process."""

    def __init__(self) -> None:
        self._callbacks: dict[tuple[str, str], dict[int, SnapshotCallback]] = {}
        self._tokens = count(1)

    def subscribers_total(self, collection: str, doc_id: str) -> int:
        return len(self._callbacks.get((collection, doc_id), {}))

    async def ping(self) -> bool:
        return True

    async def publish(self, collection: str, doc_id: str, snapshot: Document | None) -> None:
        callbacks = list(self._callbacks.get((collection, doc_id), {}).values())
        for callback in callbacks:
            try:
                await callback(snapshot)
            except Exception:
                logger.exception(
                    "snapshot_callback_failed",
                    collection=collection,
                    doc_id=doc_id,
                )

    async def subscribe(
        self,
        collection: str,
        doc_id: str,
        callback: SnapshotCallback,
    ) -> Subscription:
        key = (collection, doc_id)
        token = next(self._tokens)
        self._callbacks.setdefault(key, {})[token] = callback

        async def _remove() -> None:
            registered = self._callbacks.get(key)
            if registered is None:
                return
            registered.pop(token, None)
            if not registered:
                del self._callbacks[key]

        return Subscription(on_cancel=_remove)


class RedisSnapshotBroker:
    """Publishes full snapshots on ``babyfoot:{collection}:{doc_id}`` channels."""

    def __init__(self, redis: Redis, *, channel_prefix: str = "babyfoot") -> None:
        self._redis = redis
        self._channel_prefix = channel_prefix

    @classmethod
    def from_url(cls, redis_url: str) -> RedisSnapshotBroker:
        return cls(Redis.from_url(redis_url))

    def channel_for(self, collection: str, doc_id: str) -> str:
        return f"{self._channel_prefix}:{collection}:{doc_id}"

    async def ping(self) -> bool:
        try:
            return await self._redis.ping() is True
        except RedisError as exc:
            raise StoreUnavailableError(str(exc)) from exc

    async def publish(self, collection: str, doc_id: str, snapshot: Document | None) -> None:
        payload = json.dumps({"collection": collection, "doc_id": doc_id, "data": snapshot})
        try:
            await self._redis.publish(self.channel_for(collection, doc_id), payload)
        except RedisError as exc:
            logger.warning(
                "snapshot_publish_failed",
                collection=collection,
                doc_id=doc_id,
                error=str(exc),
            )

    async def subscribe(
        self,
        collection: str,
        doc_id: str,
        callback: SnapshotCallback,
    ) -> Subscription:
        channel = self.channel_for(collection, doc_id)
        pubsub = self._redis.pubsub()
        try:
            await pubsub.subscribe(channel)
        except RedisError as exc:
            await pubsub.aclose()
            raise StoreUnavailableError(str(exc)) from exc

        task = asyncio.create_task(self._pump(pubsub, callback, channel=channel))

        async def _stop() -> None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
            with suppress(RedisError):
                await pubsub.unsubscribe(channel)
            await pubsub.aclose()

        return Subscription(on_cancel=_stop)

    async def _pump(self, pubsub, callback: SnapshotCallback, *, channel: str) -> None:
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                try:
                    payload = json.loads(message["data"])
                    await callback(payload.get("data"))
                except Exception:
                    logger.exception("snapshot_callback_failed", channel=channel)
        except RedisError as exc:
            # Subscribers see no further snapshots until they subscribe again.
            logger.warning("snapshot_subscription_lost", channel=channel, error=str(exc))

    async def aclose(self) -> None:
        await self._redis.aclose()
