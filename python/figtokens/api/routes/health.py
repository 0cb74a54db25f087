"""Liveness and readiness endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from figtokens.api.deps import get_db
from figtokens.responses import success_response
from figtokens.services import health as health_service

router = APIRouter()


@router.get("/health")
async def health_check() -> dict:
    """Answers while the process is up; touches neither the database nor Figma."""
    return success_response({"status": "ok"})


@router.get("/health/ready")
def readiness_check(db: Annotated[Session, Depends(get_db)]) -> dict:
    """503 E_DATABASE_UNAVAILABLE until the token store answers a query."""
    health_service.check_database(db)
    return success_response({"status": "ok", "database": "ok"})
