"""Design file routes.

Routes are transport-only:
- Parse the request
- Call exactly one service function
- Return success(...) or raise ApiError

No domain logic or raw DB access in routes.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from figtokens.api.deps import get_db, get_figma_client
from figtokens.responses import success_response
from figtokens.schemas.design_files import ImportFileRequest, SyncFileRequest
from figtokens.services import design_files as design_files_service
from figtokens.services.figma_client import FigmaClient

router = APIRouter()


@router.post("/files/import", status_code=201)
def import_file(
    request: ImportFileRequest,
    db: Annotated[Session, Depends(get_db)],
    figma_client: Annotated[FigmaClient, Depends(get_figma_client)],
) -> dict:
    """Import a Figma file's styles and variables.

    Re-importing a known file key replaces its tokens. Returns the file
    with its tokens.
    """
    result = design_files_service.import_file(db, figma_client, request.file_key, request.token)
    return success_response(result.model_dump(mode="json"))


@router.get("/files")
def list_files(
    db: Annotated[Session, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> dict:
    """List imported files, newest first, with token counts."""
    result = design_files_service.list_design_files(db, limit=limit, offset=offset)
    return success_response(result.model_dump(mode="json"))


@router.get("/files/{file_id}")
def get_file(
    file_id: UUID,
    db: Annotated[Session, Depends(get_db)],
) -> dict:
    """Get a file with its tokens ordered by category, then name."""
    result = design_files_service.get_design_file_detail(db, file_id)
    return success_response(result.model_dump(mode="json"))


@router.post("/files/{file_id}/sync")
def sync_file(
    file_id: UUID,
    request: SyncFileRequest,
    db: Annotated[Session, Depends(get_db)],
    figma_client: Annotated[FigmaClient, Depends(get_figma_client)],
) -> dict:
    """Re-import a stored file from Figma, replacing its tokens."""
    result = design_files_service.sync_file(db, figma_client, file_id, request.token)
    return success_response(result.model_dump(mode="json"))


@router.delete("/files/{file_id}", status_code=204)
def delete_file(
    file_id: UUID,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Delete a file and all of its tokens."""
    design_files_service.delete_design_file(db, file_id)
    return Response(status_code=204)
