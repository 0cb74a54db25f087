"""API route definitions.

Uses a factory pattern to avoid import-time settings loading.
"""

from fastapi import APIRouter

from figtokens.api.routes.files import router as files_router
from figtokens.api.routes.health import router as health_router


def create_api_router() -> APIRouter:
    """Create the API router with all routes registered."""
    api_router = APIRouter()
    api_router.include_router(health_router, tags=["health"])
    api_router.include_router(files_router, tags=["files"])
    return api_router


__all__ = ["create_api_router"]
