"""API error definitions.

All API errors are defined here with their corresponding HTTP status codes.
Extraction-phase errors are subclasses so callers can catch a specific
failure (e.g. a 403 from the variables endpoint) without string matching.
"""

from enum import Enum


class ApiErrorCode(str, Enum):
    """Standardized error codes for the API.

    Format: E_CATEGORY_NAME
    """

    # Authorization errors (403)
    E_VARIABLES_FORBIDDEN = "E_VARIABLES_FORBIDDEN"

    # Not found errors (404)
    E_NOT_FOUND = "E_NOT_FOUND"
    E_DESIGN_FILE_NOT_FOUND = "E_DESIGN_FILE_NOT_FOUND"

    # Validation errors (400)
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_INVALID_FILE_KEY = "E_INVALID_FILE_KEY"

    # Routing errors (405)
    E_METHOD_NOT_ALLOWED = "E_METHOD_NOT_ALLOWED"

    # Extraction errors (422)
    E_VARIABLES_UNAVAILABLE = "E_VARIABLES_UNAVAILABLE"
    E_NO_TOKENS_FOUND = "E_NO_TOKENS_FOUND"

    # Upstream errors
    E_FIGMA_REQUEST_FAILED = "E_FIGMA_REQUEST_FAILED"  # 502
    E_FIGMA_MALFORMED_RESPONSE = "E_FIGMA_MALFORMED_RESPONSE"  # 502
    E_FIGMA_TIMEOUT = "E_FIGMA_TIMEOUT"  # 504

    # Server errors
    E_INTERNAL = "E_INTERNAL"  # 500
    E_DATABASE_UNAVAILABLE = "E_DATABASE_UNAVAILABLE"  # 503


# Error code to HTTP status mapping
ERROR_CODE_TO_STATUS: dict[ApiErrorCode, int] = {
    ApiErrorCode.E_VARIABLES_FORBIDDEN: 403,
    ApiErrorCode.E_NOT_FOUND: 404,
    ApiErrorCode.E_DESIGN_FILE_NOT_FOUND: 404,
    ApiErrorCode.E_INVALID_REQUEST: 400,
    ApiErrorCode.E_INVALID_FILE_KEY: 400,
    ApiErrorCode.E_METHOD_NOT_ALLOWED: 405,
    ApiErrorCode.E_VARIABLES_UNAVAILABLE: 422,
    ApiErrorCode.E_NO_TOKENS_FOUND: 422,
    ApiErrorCode.E_FIGMA_REQUEST_FAILED: 502,
    ApiErrorCode.E_FIGMA_MALFORMED_RESPONSE: 502,
    ApiErrorCode.E_FIGMA_TIMEOUT: 504,
    ApiErrorCode.E_INTERNAL: 500,
    ApiErrorCode.E_DATABASE_UNAVAILABLE: 503,
}


class ApiError(Exception):
    """Base exception for API errors.

    Attributes:
        code: The error code enum value
        message: Human-readable error message
        status_code: HTTP status code (derived from code)
    """

    def __init__(self, code: ApiErrorCode, message: str):
        self.code = code
        self.message = message
        self.status_code = ERROR_CODE_TO_STATUS.get(code, 500)
        super().__init__(message)


class NotFoundError(ApiError):
    """Resource not found error."""

    def __init__(self, code: ApiErrorCode = ApiErrorCode.E_NOT_FOUND, message: str = "Not found"):
        super().__init__(code, message)


class InvalidRequestError(ApiError):
    """Invalid request error."""

    def __init__(
        self, code: ApiErrorCode = ApiErrorCode.E_INVALID_REQUEST, message: str = "Invalid request"
    ):
        super().__init__(code, message)


class FigmaTransportError(ApiError):
    """The primary file fetch failed or returned a non-success status."""

    def __init__(
        self,
        message: str,
        code: ApiErrorCode = ApiErrorCode.E_FIGMA_REQUEST_FAILED,
    ):
        super().__init__(code, message)


class MalformedResponseError(ApiError):
    """The primary file response carries no document tree."""

    def __init__(
        self, message: str = "Invalid Figma response: Document structure is missing."
    ):
        super().__init__(ApiErrorCode.E_FIGMA_MALFORMED_RESPONSE, message)


class VariablesUnauthorizedError(ApiError):
    """The local variables endpoint answered HTTP 403."""

    def __init__(self, message: str = "Variables API returned HTTP 403"):
        super().__init__(ApiErrorCode.E_VARIABLES_FORBIDDEN, message)


class VariablesUnavailableError(ApiError):
    """The local variables endpoint failed or returned no usable data."""

    def __init__(self, message: str):
        super().__init__(ApiErrorCode.E_VARIABLES_UNAVAILABLE, message)


class NoTokensFoundError(ApiError):
    """Neither inline nor dedicated extraction produced any token."""

    def __init__(
        self,
        message: str = (
            "No styles or variables found in this Figma file. Please ensure the file "
            "has color styles, text styles, or variables defined."
        ),
    ):
        super().__init__(ApiErrorCode.E_NO_TOKENS_FOUND, message)


class DatabaseUnavailableError(ApiError):
    """The token store did not answer a readiness query."""

    def __init__(self, message: str = "Database unavailable"):
        super().__init__(ApiErrorCode.E_DATABASE_UNAVAILABLE, message)
