from __future__ import annotations

import asyncio
import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from babyfoot.store.brokers import RedisSnapshotBroker


class _DroppingPubSub:
    """Delivers the queued messages, then loses the connection."""

    def __init__(self, messages: list[dict]) -> None:
        self._messages = messages
        self.channels: list[str] = []
        self.closed = False
        self.listen_done = asyncio.Event()

    async def subscribe(self, channel: str) -> None:
        self.channels.append(channel)

    async def unsubscribe(self, channel: str) -> None:
        raise RedisConnectionError("Connection closed by server.")

    async def aclose(self) -> None:
        self.closed = True

    async def listen(self):
        try:
            for message in self._messages:
                yield message
            raise RedisConnectionError("Connection closed by server.")
        finally:
            self.listen_done.set()


class _FakeRedis:
    def __init__(self, pubsub: _DroppingPubSub) -> None:
        self._pubsub = pubsub

    def pubsub(self) -> _DroppingPubSub:
        return self._pubsub

    async def ping(self) -> bool:
        return True


@pytest.mark.asyncio
async def test_subscription_stops_quietly_when_redis_drops() -> None:
    snapshot = {"status": "in_progress", "scores": [1, 0]}
    pubsub = _DroppingPubSub(
        [
            {"type": "subscribe", "data": 1},
            {"type": "message", "data": json.dumps({"collection": "games", "doc_id": "g1", "data": snapshot})},
        ]
    )
    broker = RedisSnapshotBroker(_FakeRedis(pubsub))
    seen: list[dict | None] = []

    async def _collect(data: dict | None) -> None:
        seen.append(data)

    subscription = await broker.subscribe("games", "g1", _collect)
    await asyncio.wait_for(pubsub.listen_done.wait(), timeout=1.0)

    assert pubsub.channels == ["babyfoot:games:g1"]
    assert seen == [snapshot]

    await subscription.cancel()
    assert subscription.cancelled
    assert pubsub.closed


@pytest.mark.asyncio
async def test_redis_broker_ping() -> None:
    broker = RedisSnapshotBroker(_FakeRedis(_DroppingPubSub([])))
    assert await broker.ping() is True
