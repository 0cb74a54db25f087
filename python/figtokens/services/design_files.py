"""Design file service layer.

All design-file business logic lives here.
Routes may not contain domain logic or raw DB access - they must call these functions.

Import flow:
    parse_file_key -> fetch file -> extract tokens -> sync_design_file

Extraction runs to completion before anything is written, so any
extraction failure leaves the stored file and its tokens untouched.
"""

import re
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from figtokens.config import get_settings
from figtokens.db.models import DesignFile, TokenEntry
from figtokens.db.session import transaction
from figtokens.errors import (
    ApiErrorCode,
    FigmaTransportError,
    InvalidRequestError,
    MalformedResponseError,
    NotFoundError,
)
from figtokens.logging import get_logger, set_file_key
from figtokens.schemas.design_files import (
    DesignFileDetailOut,
    DesignFileListOut,
    DesignFileOut,
    TokenEntryOut,
)
from figtokens.services.extraction import extract_tokens
from figtokens.services.figma_client import FigmaApiError, FigmaClient
from figtokens.services.sync_writer import FileMetadata, sync_design_file
from figtokens.services.token_preview import build_preview

logger = get_logger(__name__)

# /file/<key>/..., /design/<key>/... in pasted Figma URLs
FIGMA_URL_KEY_PATTERN = re.compile(r"/(?:file|design)/([A-Za-z0-9]+)")
NON_ALNUM_PATTERN = re.compile(r"[^A-Za-z0-9]")

MAX_LIST_LIMIT = 100


def parse_file_key(raw: str) -> str:
    """Extract a Figma file key from a bare key or a pasted URL.

    Raises:
        InvalidRequestError: If no key can be recovered.
    """
    value = raw.strip()

    if "figma.com" in value:
        match = FIGMA_URL_KEY_PATTERN.search(value)
        if match:
            return match.group(1)

    segments = [segment for segment in value.split("/") if segment]
    candidate = segments[-1] if segments else ""
    candidate = candidate.split("?", 1)[0]
    file_key = NON_ALNUM_PATTERN.sub("", candidate)

    if not file_key:
        raise InvalidRequestError(ApiErrorCode.E_INVALID_FILE_KEY, "Invalid Figma file key")
    return file_key


def fetch_file_document(client: FigmaClient, file_key: str, credential: str) -> dict:
    """Fetch the primary file response and check it carries a document.

    Raises:
        FigmaTransportError: The request failed or returned non-2xx.
        MalformedResponseError: The response has no `document`.
    """
    try:
        file_document = client.get_file(file_key, credential)
    except FigmaApiError as e:
        code = (
            ApiErrorCode.E_FIGMA_TIMEOUT if e.timed_out else ApiErrorCode.E_FIGMA_REQUEST_FAILED
        )
        raise FigmaTransportError(e.message, code=code) from e

    if not file_document.get("document"):
        raise MalformedResponseError()

    logger.info("figma_file_fetched", name=file_document.get("name"))
    return file_document


def import_file(
    db: Session,
    client: FigmaClient,
    file_key: str,
    credential: str,
) -> DesignFileDetailOut:
    """Import (or re-import) a Figma file and its design tokens.

    Args:
        db: Database session.
        client: Figma API client.
        file_key: Figma file key or a pasted Figma URL.
        credential: Figma personal access token, passed through.

    Returns:
        The persisted file with its tokens.

    Raises:
        InvalidRequestError: Empty key or credential.
        FigmaTransportError / MalformedResponseError: Primary fetch failed.
        VariablesUnauthorizedError / VariablesUnavailableError /
        NoTokensFoundError: No tokens could be extracted.
    """
    if not file_key or not file_key.strip() or not credential or not credential.strip():
        raise InvalidRequestError(message="Please provide both File Key and Access Token.")

    settings = get_settings()
    file_key = parse_file_key(file_key)
    set_file_key(file_key)

    file_document = fetch_file_document(client, file_key, credential)
    entries = extract_tokens(
        client,
        file_key,
        file_document,
        credential,
        style_fetch_limit=settings.style_node_fetch_limit,
    )
    design_file = sync_design_file(
        db,
        file_key,
        FileMetadata.from_file_document(file_document),
        entries,
        batch_size=settings.token_insert_batch_size,
    )
    return get_design_file_detail(db, design_file.id)


def sync_file(
    db: Session,
    client: FigmaClient,
    file_id: UUID,
    credential: str,
) -> DesignFileDetailOut:
    """Re-run the import for an already stored file, using its file key."""
    design_file = get_design_file_or_404(db, file_id)
    return import_file(db, client, design_file.file_key, credential)


def get_design_file_or_404(db: Session, file_id: UUID) -> DesignFile:
    design_file = db.get(DesignFile, file_id)
    if design_file is None:
        raise NotFoundError(ApiErrorCode.E_DESIGN_FILE_NOT_FOUND, "Design file not found")
    return design_file


def _token_count(db: Session, file_id: UUID) -> int:
    return db.scalar(
        select(func.count()).select_from(TokenEntry).where(TokenEntry.file_id == file_id)
    )


def list_design_files(db: Session, limit: int = 50, offset: int = 0) -> DesignFileListOut:
    """List stored design files, newest first, with their token counts."""
    if not 1 <= limit <= MAX_LIST_LIMIT:
        raise InvalidRequestError(message=f"limit must be between 1 and {MAX_LIST_LIMIT}")
    if offset < 0:
        raise InvalidRequestError(message="offset must be >= 0")

    counts = (
        select(TokenEntry.file_id, func.count().label("token_count"))
        .group_by(TokenEntry.file_id)
        .subquery()
    )
    rows = db.execute(
        select(DesignFile, func.coalesce(counts.c.token_count, 0))
        .outerjoin(counts, counts.c.file_id == DesignFile.id)
        .order_by(DesignFile.created_at.desc(), DesignFile.file_key)
        .limit(limit)
        .offset(offset)
    ).all()
    total = db.scalar(select(func.count()).select_from(DesignFile))

    files = [
        DesignFileOut(
            id=design_file.id,
            file_key=design_file.file_key,
            name=design_file.name,
            thumbnail_url=design_file.thumbnail_url,
            token_count=token_count,
            created_at=design_file.created_at,
            updated_at=design_file.updated_at,
        )
        for design_file, token_count in rows
    ]
    return DesignFileListOut(files=files, total=total, limit=limit, offset=offset)


def get_design_file_detail(db: Session, file_id: UUID) -> DesignFileDetailOut:
    """Get a design file with its tokens ordered by category, then name.

    Raises:
        NotFoundError: If the file does not exist.
    """
    design_file = get_design_file_or_404(db, file_id)
    db.refresh(design_file)

    entries = db.scalars(
        select(TokenEntry)
        .where(TokenEntry.file_id == design_file.id)
        .order_by(TokenEntry.category, TokenEntry.name, TokenEntry.token_id)
    ).all()
    tokens = [
        TokenEntryOut(
            id=entry.id,
            token_id=entry.token_id,
            name=entry.name,
            category=entry.category,
            raw_payload=entry.raw_payload,
            preview=build_preview(entry.category, entry.raw_payload),
        )
        for entry in entries
    ]
    return DesignFileDetailOut(
        id=design_file.id,
        file_key=design_file.file_key,
        name=design_file.name,
        thumbnail_url=design_file.thumbnail_url,
        token_count=len(tokens),
        created_at=design_file.created_at,
        updated_at=design_file.updated_at,
        tokens=tokens,
    )


def delete_design_file(db: Session, file_id: UUID) -> None:
    """Delete a design file and, by cascade, all of its token entries.

    Raises:
        NotFoundError: If the file does not exist.
    """
    design_file = get_design_file_or_404(db, file_id)
    token_count = _token_count(db, file_id)
    with transaction(db):
        db.delete(design_file)
    logger.info("design_file_deleted", design_file_id=str(file_id), token_count=token_count)
