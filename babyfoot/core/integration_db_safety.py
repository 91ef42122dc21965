from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import make_url

TEST_DB_MARKER = "test"
LOCAL_DB_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "postgres", "babyfoot_postgres"})


@dataclass(frozen=True, slots=True)
class IntegrationDbVerdict:
    is_safe: bool
    reason: str
    database_name: str
    host: str


def assess_integration_db(database_url: str) -> IntegrationDbVerdict:
    url = make_url(database_url)
    database_name = (url.database or "").strip()
    host = (url.host or "").strip().lower()

    def _verdict(reason: str) -> IntegrationDbVerdict:
        return IntegrationDbVerdict(
            is_safe=reason == "ok",
            reason=reason,
            database_name=database_name,
            host=host,
        )

    if url.get_backend_name() != "postgresql":
        return _verdict("only PostgreSQL databases host the documents table")
    if not database_name:
        return _verdict("database name is empty")
    if TEST_DB_MARKER not in database_name.lower():
        return _verdict("database name must contain 'test'")
    if host not in LOCAL_DB_HOSTS:
        return _verdict("host is not a local integration-test host")
    return _verdict("ok")


def assert_safe_integration_db(database_url: str) -> None:
    verdict = assess_integration_db(database_url)
    if verdict.is_safe:
        return
    raise RuntimeError(
        "Refusing to truncate the documents table.\n"
        f"Reason: {verdict.reason}\n"
        f"Resolved DB: name='{verdict.database_name}' host='{verdict.host}'\n"
        "Point DATABASE_URL at a local test database such as 'babyfoot_test'."
    )
