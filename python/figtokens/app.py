"""FastAPI application creation and configuration.

Registers exception handlers, routes and the request-id middleware.

Middleware Ordering:
- Middleware runs in reverse order of registration
- RequestIDMiddleware is added LAST (via add_request_id_middleware) so it
  runs FIRST and every response carries X-Request-ID

Figma Client Lifecycle:
- One httpx.Client is created at startup and stored in app.state
- FigmaClient wraps it for connection pooling; per-call timeouts come from settings
- The client is closed at shutdown
"""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from figtokens.api.routes import create_api_router
from figtokens.config import get_settings
from figtokens.errors import ApiError
from figtokens.logging import configure_logging, get_logger
from figtokens.middleware.request_id import RequestIDMiddleware
from figtokens.responses import (
    api_error_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from figtokens.services.figma_client import CONNECT_TIMEOUT_S, FigmaClient

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared Figma HTTP client and close it on shutdown."""
    settings = get_settings()

    app.state.httpx_client = httpx.Client(
        timeout=httpx.Timeout(settings.figma_file_timeout_s, connect=CONNECT_TIMEOUT_S),
        limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
    )
    app.state.figma_client = FigmaClient.from_settings(app.state.httpx_client, settings)

    logger.info("figma_client_initialized", base_url=settings.normalized_api_base_url)

    yield

    app.state.httpx_client.close()
    logger.info("httpx_client_closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    configure_logging(json_format=settings.log_json)

    app = FastAPI(
        title="figtokens API",
        description="Imports design tokens (styles and variables) from Figma files",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(create_api_router())

    logger.info("app_created", env=settings.figtokens_env.value)
    return app


def add_request_id_middleware(app: FastAPI, log_requests: bool = True) -> None:
    """Add request-id middleware to the app.

    Call AFTER all other middleware is added, so it runs FIRST.

    Args:
        app: The FastAPI application.
        log_requests: Whether to log access entries for each request.
    """
    app.add_middleware(RequestIDMiddleware, log_requests=log_requests)
    logger.info("request_id_middleware_enabled")
