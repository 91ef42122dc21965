from __future__ import annotations

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from babyfoot.core.errors import StoreUnavailableError
from babyfoot.db.models.documents import DocumentRow
from babyfoot.db.repo.documents_repo import DocumentsRepo
from babyfoot.store.base import (
    QUERY_OP_EQ,
    QUERY_OPS,
    Document,
    DocumentAlreadyExistsError,
    DocumentMissingError,
    SnapshotCallback,
    StoredDocument,
    StoreVersionConflictError,
    Subscription,
)
from babyfoot.store.brokers import LocalSnapshotBroker, SnapshotBroker


class SqlDocumentStore:
    """Document store on a single Postgres ``documents`` table.

    Each call runs in its own transaction. Conditional updates compare the row
    ``version`` inside the UPDATE statement, so no row lock is held between the
    caller's read and write. Query fields must hold string values.
    """

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        *,
        broker: SnapshotBroker | None = None,
    ) -> None:
        self._sessionmaker = sessionmaker
        self._broker = broker or LocalSnapshotBroker()

    @property
    def broker(self) -> SnapshotBroker:
        return self._broker

    async def get(self, collection: str, doc_id: str) -> StoredDocument | None:
        try:
            async with self._sessionmaker() as session:
                row = await DocumentsRepo.get(session, collection=collection, doc_id=doc_id)
                return _to_stored(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc

    async def create(self, collection: str, doc_id: str, data: Document) -> StoredDocument:
        try:
            async with self._sessionmaker.begin() as session:
                created = await DocumentsRepo.create_once(
                    session,
                    collection=collection,
                    doc_id=doc_id,
                    data=data,
                )
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        if not created:
            raise DocumentAlreadyExistsError(f"{collection}/{doc_id}")
        await self._broker.publish(collection, doc_id, data)
        return StoredDocument(collection=collection, doc_id=doc_id, version=1, data=data)

    async def update(
        self,
        collection: str,
        doc_id: str,
        data: Document,
        *,
        expected_version: int,
    ) -> StoredDocument:
        try:
            async with self._sessionmaker.begin() as session:
                new_version = await DocumentsRepo.update_if_version(
                    session,
                    collection=collection,
                    doc_id=doc_id,
                    data=data,
                    expected_version=expected_version,
                )
                if new_version is None:
                    exists = await DocumentsRepo.get(session, collection=collection, doc_id=doc_id)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        if new_version is None:
            if exists is None:
                raise DocumentMissingError(f"{collection}/{doc_id}")
            raise StoreVersionConflictError(
                f"{collection}/{doc_id}: expected v{expected_version}, found v{exists.version}"
            )
        await self._broker.publish(collection, doc_id, data)
        return StoredDocument(
            collection=collection,
            doc_id=doc_id,
            version=new_version,
            data=data,
        )

    async def delete(self, collection: str, doc_id: str) -> bool:
        try:
            async with self._sessionmaker.begin() as session:
                deleted = await DocumentsRepo.delete(session, collection=collection, doc_id=doc_id)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        if deleted:
            await self._broker.publish(collection, doc_id, None)
        return deleted

    async def query(
        self,
        collection: str,
        field: str,
        op: str,
        value: Any,
        *,
        limit: int | None = None,
    ) -> list[StoredDocument]:
        if op not in QUERY_OPS:
            raise ValueError(f"unsupported query op: {op}")
        values = (value,) if op == QUERY_OP_EQ else tuple(value)
        try:
            async with self._sessionmaker() as session:
                rows = await DocumentsRepo.list_by_field(
                    session,
                    collection=collection,
                    field=field,
                    values=values,
                    limit=limit,
                )
                return [_to_stored(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc

    async def subscribe(
        self,
        collection: str,
        doc_id: str,
        callback: SnapshotCallback,
    ) -> Subscription:
        return await self._broker.subscribe(collection, doc_id, callback)


def _to_stored(row: DocumentRow) -> StoredDocument:
    return StoredDocument(
        collection=row.collection,
        doc_id=row.id,
        version=int(row.version),
        data=dict(row.data),
    )
