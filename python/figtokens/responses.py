"""Response envelopes and the exception handlers that produce them.

Successful bodies are {"data": ...}. Every failure, including routing
errors raised by the framework itself, is
{"error": {"code": "E_...", "message": "...", "request_id": "..."}}.
"""

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from figtokens.errors import ERROR_CODE_TO_STATUS, ApiError, ApiErrorCode
from figtokens.logging import get_logger, get_request_id

logger = get_logger(__name__)

# Statuses the router raises on its own; everything else is an ApiError.
ROUTING_STATUS_CODES = {
    404: ApiErrorCode.E_NOT_FOUND,
    405: ApiErrorCode.E_METHOD_NOT_ALLOWED,
}


def success_response(data: Any) -> dict[str, Any]:
    return {"data": data}


def error_response(
    code: ApiErrorCode, message: str, request_id: str | None = None
) -> dict[str, Any]:
    """Build an error envelope, tagged with the current request id if any."""
    error = {"code": code.value, "message": message}
    request_id = request_id or get_request_id()
    if request_id:
        error["request_id"] = request_id
    return {"error": error}


def _error_json(code: ApiErrorCode, message: str, status_code: int | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code or ERROR_CODE_TO_STATUS[code],
        content=error_response(code, message),
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return _error_json(exc.code, exc.message, exc.status_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown paths and unsupported methods on known paths."""
    code = ROUTING_STATUS_CODES.get(exc.status_code, ApiErrorCode.E_INTERNAL)
    return _error_json(code, str(exc.detail), exc.status_code)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed JSON, or a body failing its schema (missing or empty `token`).

    Only the error count is logged; request bodies carry Figma credentials.
    """
    logger.info("request_body_rejected", path=request.url.path, error_count=len(exc.errors()))
    return _error_json(ApiErrorCode.E_INVALID_REQUEST, "Invalid request body")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500 with E_INTERNAL; the traceback goes to the log, never to the client."""
    logger.exception("unhandled_exception", path=request.url.path)
    return _error_json(ApiErrorCode.E_INTERNAL, "Internal server error")
