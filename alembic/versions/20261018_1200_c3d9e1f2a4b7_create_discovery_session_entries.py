"""Create discovery_session_entries

Revision ID: c3d9e1f2a4b7
Revises:
Create Date: 2026-10-18 12:00:00+00:00

Changes:
1. discovery_session_entries table:
   - one row per (session_id, key), JSON value
   - unique (session_id, key), index on session_id
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy import inspect

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c3d9e1f2a4b7"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

TABLE_NAME = "discovery_session_entries"


def table_exists(table_name: str) -> bool:
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def index_exists(table_name: str, index_name: str) -> bool:
    bind = op.get_bind()
    inspector = inspect(bind)
    indexes = inspector.get_indexes(table_name)
    return any(idx.get("name") == index_name for idx in indexes)


def upgrade() -> None:
    if not table_exists(TABLE_NAME):
        op.create_table(
            TABLE_NAME,
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("session_id", sa.String(128), nullable=False),
            sa.Column("key", sa.String(255), nullable=False),
            sa.Column("value", sa.JSON(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
            sa.UniqueConstraint(
                "session_id", "key", name="uq_discovery_session_entries_session_key"
            ),
        )

    if not index_exists(TABLE_NAME, "idx_discovery_session_entries_session_id"):
        op.create_index("idx_discovery_session_entries_session_id", TABLE_NAME, ["session_id"])


def downgrade() -> None:
    if not table_exists(TABLE_NAME):
        return
    if index_exists(TABLE_NAME, "idx_discovery_session_entries_session_id"):
        op.drop_index("idx_discovery_session_entries_session_id", table_name=TABLE_NAME)
    op.drop_table(TABLE_NAME)
