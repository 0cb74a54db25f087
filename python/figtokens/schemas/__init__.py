"""Pydantic schemas for request/response models.

All schemas are re-exported here for convenient imports.
"""

from figtokens.schemas.design_files import (
    DesignFileDetailOut,
    DesignFileListOut,
    DesignFileOut,
    ImportFileRequest,
    SyncFileRequest,
    TokenEntryOut,
)

__all__ = [
    "ImportFileRequest",
    "SyncFileRequest",
    "TokenEntryOut",
    "DesignFileOut",
    "DesignFileDetailOut",
    "DesignFileListOut",
]
