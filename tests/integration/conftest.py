from __future__ import annotations

import pytest
from sqlalchemy import text

from babyfoot.core.integration_db_safety import assert_safe_integration_db
from babyfoot.db.session import engine


@pytest.fixture(autouse=True)
async def cleanup_documents() -> None:
    # Dispose pooled connections between tests to avoid cross-event-loop asyncpg reuse.
    await engine.dispose()

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - environment-dependent
        pytest.skip(f"Postgres is required for integration tests: {exc}")

    assert_safe_integration_db(str(engine.url))
    async with engine.begin() as conn:
        await conn.execute(text("TRUNCATE TABLE documents"))

    yield

    await engine.dispose()
