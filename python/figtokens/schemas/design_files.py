"""Design file and token entry Pydantic schemas.

Contains request models for import / sync and response models for the
design file endpoints.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ImportFileRequest(BaseModel):
    """Request schema for POST /files/import.

    `file_key` may be a bare key or a pasted Figma URL.
    """

    file_key: str = Field(min_length=1, max_length=2048)
    token: str = Field(min_length=1, max_length=512)


class SyncFileRequest(BaseModel):
    """Request schema for POST /files/{file_id}/sync."""

    token: str = Field(min_length=1, max_length=512)


class TokenEntryOut(BaseModel):
    """Response schema for a token entry."""

    id: UUID
    token_id: str
    name: str
    category: str
    raw_payload: dict[str, Any]
    preview: dict[str, Any] | None = None

    model_config = ConfigDict(from_attributes=True)


class DesignFileOut(BaseModel):
    """Response schema for a design file in listings."""

    id: UUID
    file_key: str
    name: str
    thumbnail_url: str | None
    token_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DesignFileDetailOut(DesignFileOut):
    """Response schema for a design file with its tokens.

    `tokens` is ordered by category, then name.
    """

    tokens: list[TokenEntryOut]


class DesignFileListOut(BaseModel):
    """Response schema for GET /files."""

    files: list[DesignFileOut]
    total: int
    limit: int
    offset: int
