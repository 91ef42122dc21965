from __future__ import annotations

import asyncio
import re

import asyncpg
from sqlalchemy.engine import make_url

from babyfoot.core.config import get_settings
from babyfoot.core.integration_db_safety import assess_integration_db

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


async def ensure_test_database(database_url: str) -> bool:
    """Creates the integration-test database when missing; returns True if created."""
    verdict = assess_integration_db(database_url)
    if not verdict.is_safe:
        raise RuntimeError(f"Refusing to create '{verdict.database_name}': {verdict.reason}")
    if IDENTIFIER_RE.fullmatch(verdict.database_name) is None:
        raise RuntimeError(f"Unsupported database name '{verdict.database_name}'")

    url = make_url(database_url)
    if url.username is None:
        raise RuntimeError("DATABASE_URL username is required")

    conn = await asyncpg.connect(
        host=url.host or "localhost",
        port=int(url.port or 5432),
        user=url.username,
        password=url.password,
        database="postgres",
    )
    try:
        exists = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", verdict.database_name)
        if exists:
            return False
        await conn.execute(f'CREATE DATABASE "{verdict.database_name}"')
        return True
    finally:
        await conn.close()


def main() -> int:
    database_url = get_settings().database_url
    created = asyncio.run(ensure_test_database(database_url))
    state = "created" if created else "exists"
    print(f"ensure_test_db: {state} db={make_url(database_url).database}")  # noqa: T201
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
