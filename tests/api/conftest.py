from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from babyfoot.api.deps import get_now_utc, get_store
from babyfoot.main import app
from babyfoot.store.memory import InMemoryDocumentStore
from tests.game.babyfoot_fixtures import NOW_UTC


class ApiClock:
    def __init__(self, now_utc: datetime) -> None:
        self.now_utc = now_utc

    def __call__(self) -> datetime:
        return self.now_utc

    def advance(self, **kwargs) -> None:
        self.now_utc = self.now_utc + timedelta(**kwargs)


@pytest.fixture
def api_clock() -> ApiClock:
    return ApiClock(NOW_UTC)


@pytest.fixture
def api_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def client(api_store: InMemoryDocumentStore, api_clock: ApiClock):
    app.dependency_overrides[get_store] = lambda: api_store
    app.dependency_overrides[get_now_utc] = api_clock
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
