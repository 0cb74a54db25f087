"""FastAPI dependencies for route handlers."""

from fastapi import Request

from figtokens.db.session import get_db
from figtokens.services.figma_client import FigmaClient

__all__ = ["get_db", "get_figma_client"]


def get_figma_client(request: Request) -> FigmaClient:
    """Get the shared Figma client created at app startup."""
    return request.app.state.figma_client
