from __future__ import annotations

from collections.abc import Callable

import structlog

from babyfoot.core.errors import ConcurrentModificationError, NotFoundError
from babyfoot.store.base import (
    Document,
    DocumentMissingError,
    DocumentStore,
    StoredDocument,
    StoreVersionConflictError,
)

logger = structlog.get_logger(__name__)

Transition = Callable[[Document], Document | None]


async def mutate_document(
    store: DocumentStore,
    *,
    collection: str,
    doc_id: str,
    transition: Transition,
    max_attempts: int,
    not_found: type[NotFoundError] = NotFoundError,
) -> StoredDocument:
    """Applies ``transition`` with optimistic compare-and-swap on the document version.

    The transition receives the latest stored data and returns the next data, or
    ``None`` when nothing changes. Errors raised by the transition abort without
    writing. On a version conflict the document is re-read and the transition
    re-applied from scratch.
    """
    attempts = max(1, int(max_attempts))
    for attempt in range(1, attempts + 1):
        stored = await store.get(collection, doc_id)
        if stored is None:
            raise not_found
        next_data = transition(stored.data)
        if next_data is None or next_data == stored.data:
            return stored
        try:
            return await store.update(
                collection,
                doc_id,
                next_data,
                expected_version=stored.version,
            )
        except StoreVersionConflictError:
            logger.debug(
                "document_cas_conflict",
                collection=collection,
                doc_id=doc_id,
                attempt=attempt,
            )
        except DocumentMissingError as exc:
            raise not_found from exc
    logger.warning(
        "document_cas_exhausted",
        collection=collection,
        doc_id=doc_id,
        attempts=attempts,
    )
    raise ConcurrentModificationError(f"{collection}/{doc_id}")
