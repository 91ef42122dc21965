from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

import structlog

from babyfoot.core.pin_codes import generate_pin_code
from babyfoot.game.common.documents import decode_datetime
from babyfoot.game.common.errors import PinCodeExhaustedError
from babyfoot.store.base import DocumentStore

logger = structlog.get_logger(__name__)


async def is_pin_code_taken(
    store: DocumentStore,
    *,
    collection: str,
    pin_code: str,
    active_statuses: Iterable[str],
    now_utc: datetime,
) -> bool:
    statuses = frozenset(active_statuses)
    for stored in await store.query(collection, "pin_code", "==", pin_code):
        if stored.data.get("status") not in statuses:
            continue
        expires_at = decode_datetime(stored.data.get("expires_at"))
        if expires_at is not None and expires_at < now_utc:
            continue
        return True
    return False


async def allocate_pin_code(
    store: DocumentStore,
    *,
    collection: str,
    active_statuses: Iterable[str],
    now_utc: datetime,
    max_attempts: int,
) -> str:
    statuses = tuple(active_statuses)
    attempts = max(1, int(max_attempts))
    for attempt in range(1, attempts + 1):
        pin_code = generate_pin_code()
        taken = await is_pin_code_taken(
            store,
            collection=collection,
            pin_code=pin_code,
            active_statuses=statuses,
            now_utc=now_utc,
        )
        if not taken:
            return pin_code
        logger.debug("pin_code_collision", collection=collection, attempt=attempt)
    logger.warning("pin_code_allocation_exhausted", collection=collection, attempts=attempts)
    raise PinCodeExhaustedError
