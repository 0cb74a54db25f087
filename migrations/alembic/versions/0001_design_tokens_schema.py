"""Design tokens schema - design_files, token_entries

Revision ID: 0001
Revises:
Create Date: 2026-10-19

design_files is keyed naturally by the Figma file key. token_entries hold
one row per style or variable and are removed with their file.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JSON_PAYLOAD = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    # ==========================================================================
    # design_files table
    # ==========================================================================
    op.create_table(
        "design_files",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("file_key", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("thumbnail_url", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("file_key", name="uq_design_files_file_key"),
    )

    # ==========================================================================
    # token_entries table
    # ==========================================================================
    op.create_table(
        "token_entries",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("file_id", sa.Uuid(), nullable=False),
        sa.Column("node_id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("raw_data", JSON_PAYLOAD, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["file_id"],
            ["design_files.id"],
            name="fk_token_entries_file_id",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("file_id", "node_id", name="uq_token_entries_file_node"),
    )
    op.create_index("ix_token_entries_file_type", "token_entries", ["file_id", "type"])


def downgrade() -> None:
    op.drop_index("ix_token_entries_file_type", table_name="token_entries")
    op.drop_table("token_entries")
    op.drop_table("design_files")
