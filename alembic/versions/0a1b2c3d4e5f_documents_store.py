"""documents_store

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-18 09:30:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "0a1b2c3d4e5f"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "documents",
        sa.Column("collection", sa.String(32), nullable=False),
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("version >= 1", name="ck_documents_version_positive"),
        sa.PrimaryKeyConstraint("collection", "id", name="pk_documents"),
    )
    op.create_index(
        "idx_documents_collection_pin_code",
        "documents",
        ["collection", sa.text("(data ->> 'pin_code')")],
    )
    op.create_index(
        "idx_documents_collection_status",
        "documents",
        ["collection", sa.text("(data ->> 'status')")],
    )


def downgrade() -> None:
    op.drop_index("idx_documents_collection_status", table_name="documents")
    op.drop_index("idx_documents_collection_pin_code", table_name="documents")
    op.drop_table("documents")
