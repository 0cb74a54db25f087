"""SQLAlchemy ORM models for figtokens.

Defines all database tables using SQLAlchemy 2.x declarative patterns.
Column types are kept dialect-neutral (Uuid, JSON with a JSONB variant)
so the same models run on PostgreSQL in production and SQLite in tests.
"""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Index,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Token payloads are opaque JSON; JSONB on PostgreSQL
JSONPayload = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# =============================================================================
# Models
# =============================================================================


class DesignFile(Base):
    """An imported Figma file.

    `file_key` is the natural key assigned by Figma; re-importing the same
    key updates this row instead of creating another one.
    """

    __tablename__ = "design_files"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    file_key: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (UniqueConstraint("file_key", name="uq_design_files_file_key"),)

    # Relationships
    token_entries: Mapped[list["TokenEntry"]] = relationship(
        "TokenEntry",
        back_populates="design_file",
        cascade="all, delete-orphan",
    )


class TokenEntry(Base):
    """A style or variable extracted from a DesignFile.

    Columns keep the storage names (node_id, type, raw_data); attributes use
    the token vocabulary (token_id, category, raw_payload).
    """

    __tablename__ = "token_entries"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    file_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("design_files.id", ondelete="CASCADE"),
        nullable=False,
    )
    token_id: Mapped[str] = mapped_column("node_id", Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column("type", Text, nullable=False)
    raw_payload: Mapped[dict[str, Any]] = mapped_column("raw_data", JSONPayload, nullable=False)

    __table_args__ = (
        UniqueConstraint("file_id", "node_id", name="uq_token_entries_file_node"),
        Index("ix_token_entries_file_type", "file_id", "type"),
    )

    # Relationships
    design_file: Mapped["DesignFile"] = relationship("DesignFile", back_populates="token_entries")
