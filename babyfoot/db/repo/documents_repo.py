from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from babyfoot.db.models.documents import DocumentRow


class DocumentsRepo:
    @staticmethod
    async def get(session: AsyncSession, *, collection: str, doc_id: str) -> DocumentRow | None:
        return await session.get(DocumentRow, (collection, doc_id))

    @staticmethod
    async def create_once(
        session: AsyncSession,
        *,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
    ) -> bool:
        stmt = (
            insert(DocumentRow)
            .values(collection=collection, id=doc_id, version=1, data=data)
            .on_conflict_do_nothing(index_elements=[DocumentRow.collection, DocumentRow.id])
            .returning(DocumentRow.version)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def update_if_version(
        session: AsyncSession,
        *,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        expected_version: int,
    ) -> int | None:
        stmt = (
            update(DocumentRow)
            .where(
                DocumentRow.collection == collection,
                DocumentRow.id == doc_id,
                DocumentRow.version == expected_version,
            )
            .values(
                data=data,
                version=DocumentRow.version + 1,
                updated_at=datetime.now(timezone.utc),
            )
            .returning(DocumentRow.version)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def delete(session: AsyncSession, *, collection: str, doc_id: str) -> bool:
        stmt = (
            delete(DocumentRow)
            .where(DocumentRow.collection == collection, DocumentRow.id == doc_id)
            .returning(DocumentRow.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def list_by_field(
        session: AsyncSession,
        *,
        collection: str,
        field: str,
        values: tuple[Any, ...],
        limit: int | None = None,
    ) -> list[DocumentRow]:
        stmt = (
            select(DocumentRow)
            .where(
                DocumentRow.collection == collection,
                DocumentRow.data[field].astext.in_([str(value) for value in values]),
            )
            .order_by(DocumentRow.id.asc())
        )
        if limit is not None:
            stmt = stmt.limit(max(1, int(limit)))
        result = await session.execute(stmt)
        return list(result.scalars().all())
