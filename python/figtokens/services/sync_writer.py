"""Synchronization writer: persist a DesignFile and replace its tokens.

Everything happens in one transaction:
1. Find the DesignFile by file_key (row-locked where the dialect supports
   FOR UPDATE), creating it if absent. A concurrent creator that wins the
   unique-key race is recovered from via a savepoint.
2. Update name / thumbnail_url / updated_at.
3. Delete every TokenEntry owned by the file.
4. Bulk insert the new entries in fixed-size batches.

A failure in any batch rolls back the whole sync, so readers only ever see
the previous generation or the new one, never a mix.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from figtokens.db.models import DesignFile, TokenEntry
from figtokens.db.session import transaction
from figtokens.logging import get_logger
from figtokens.services.token_types import TokenEntryData

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 50
DEFAULT_FILE_NAME = "Untitled"


@dataclass
class FileMetadata:
    """Descriptive fields of a Figma file, taken from the file response."""

    name: str
    thumbnail_url: str | None = None

    @classmethod
    def from_file_document(cls, file_document: dict[str, Any]) -> "FileMetadata":
        name = file_document.get("name")
        thumbnail_url = file_document.get("thumbnailUrl")
        return cls(
            name=name if isinstance(name, str) and name else DEFAULT_FILE_NAME,
            thumbnail_url=thumbnail_url if isinstance(thumbnail_url, str) else None,
        )


def iter_batches(items: Sequence[Any], batch_size: int) -> Iterator[Sequence[Any]]:
    """Yield consecutive slices of at most batch_size items."""
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")
    for start in range(0, len(items), batch_size):
        yield items[start : start + batch_size]


def _get_or_create_locked(db: Session, file_key: str, metadata: FileMetadata) -> DesignFile:
    stmt = select(DesignFile).where(DesignFile.file_key == file_key).with_for_update()
    design_file = db.execute(stmt).scalar_one_or_none()
    if design_file is not None:
        return design_file

    design_file = DesignFile(
        file_key=file_key,
        name=metadata.name,
        thumbnail_url=metadata.thumbnail_url,
    )
    try:
        with db.begin_nested():
            db.add(design_file)
            db.flush()
        logger.info("design_file_created", design_file_id=str(design_file.id))
        return design_file
    except IntegrityError:
        # Lost race: another sync created the row; lock and use it
        logger.info("design_file_create_race_recovered")
        return db.execute(stmt).scalar_one()


def replace_token_entries(
    db: Session,
    file_id: Any,
    entries: Sequence[TokenEntryData],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> int:
    """Delete a file's token entries and insert the given ones in batches.

    Does not commit; callers run it inside a transaction.

    Returns:
        Number of insert batches issued.
    """
    db.execute(delete(TokenEntry).where(TokenEntry.file_id == file_id))

    batches = 0
    for batch in iter_batches(entries, batch_size):
        db.execute(
            insert(TokenEntry),
            [
                {
                    "file_id": file_id,
                    "token_id": entry.token_id,
                    "name": entry.name,
                    "category": entry.category,
                    "raw_payload": entry.raw_payload,
                }
                for entry in batch
            ],
        )
        batches += 1
    return batches


def sync_design_file(
    db: Session,
    file_key: str,
    metadata: FileMetadata,
    entries: Sequence[TokenEntryData],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> DesignFile:
    """Create or update the DesignFile for file_key and replace its tokens.

    Args:
        db: Database session.
        file_key: Figma file key (natural key).
        metadata: Name and thumbnail from the file response.
        entries: The complete, current token set for the file.
        batch_size: Max rows per insert statement.

    Returns:
        The persisted DesignFile with id populated.
    """
    with transaction(db):
        design_file = _get_or_create_locked(db, file_key, metadata)
        design_file.name = metadata.name
        design_file.thumbnail_url = metadata.thumbnail_url
        design_file.updated_at = datetime.now(UTC)
        db.flush()

        batches = replace_token_entries(db, design_file.id, entries, batch_size)

    # Bulk statements bypass the identity map
    db.expire(design_file, ["token_entries"])

    logger.info(
        "design_file_synced",
        design_file_id=str(design_file.id),
        token_count=len(entries),
        insert_batches=batches,
    )
    return design_file
