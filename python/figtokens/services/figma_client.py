"""Figma REST API client.

Thin synchronous wrapper over a shared httpx.Client exposing the three
calls the import pipeline consumes:

- get_file: GET /files/{key} (document tree, style metadata, variables)
- get_nodes: GET /files/{key}/nodes?ids=... (batched node lookup)
- get_local_variables: GET /files/{key}/variables/local

Each call carries its own timeout. The personal access token is passed in
per call as an opaque credential and sent as X-Figma-Token; the client keeps
no token state between calls.

Non-2xx responses, timeouts, and network failures are all raised as
FigmaApiError so callers decide which of them are fatal.
"""

from urllib.parse import quote

import httpx

from figtokens.config import Settings
from figtokens.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.figma.com/v1"
DEFAULT_FILE_TIMEOUT_S = 30.0
DEFAULT_NODES_TIMEOUT_S = 15.0
DEFAULT_VARIABLES_TIMEOUT_S = 10.0

# Connect timeout applied to every call
CONNECT_TIMEOUT_S = 10.0

TOKEN_HEADER = "X-Figma-Token"


class FigmaApiError(Exception):
    """A Figma API call did not produce a usable JSON body.

    Attributes:
        status_code: HTTP status of the response, None for transport failures.
        message: Human-readable description including Figma's own err/message.
        timed_out: True if the call hit its timeout.
    """

    def __init__(self, status_code: int | None, message: str, timed_out: bool = False):
        self.status_code = status_code
        self.message = message
        self.timed_out = timed_out
        super().__init__(message)


def _describe_error_response(response: httpx.Response) -> str:
    """Build "Figma API Error (<status>): <reason>[ - <detail>]" from a response."""
    message = f"Figma API Error ({response.status_code}): {response.reason_phrase}"
    if not response.content:
        return message
    try:
        body = response.json()
    except ValueError:
        return message
    if isinstance(body, dict):
        detail = body.get("err") or body.get("message")
        if detail:
            message += f" - {detail}"
    return message


class FigmaClient:
    """Figma REST API client bound to a shared httpx.Client."""

    def __init__(
        self,
        http_client: httpx.Client,
        base_url: str = DEFAULT_BASE_URL,
        file_timeout_s: float = DEFAULT_FILE_TIMEOUT_S,
        nodes_timeout_s: float = DEFAULT_NODES_TIMEOUT_S,
        variables_timeout_s: float = DEFAULT_VARIABLES_TIMEOUT_S,
    ):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.file_timeout_s = file_timeout_s
        self.nodes_timeout_s = nodes_timeout_s
        self.variables_timeout_s = variables_timeout_s

    @classmethod
    def from_settings(cls, http_client: httpx.Client, settings: Settings) -> "FigmaClient":
        """Create a client using the configured base URL and timeouts."""
        return cls(
            http_client,
            base_url=settings.normalized_api_base_url,
            file_timeout_s=settings.figma_file_timeout_s,
            nodes_timeout_s=settings.figma_nodes_timeout_s,
            variables_timeout_s=settings.figma_variables_timeout_s,
        )

    def get_file(self, file_key: str, credential: str) -> dict:
        """Fetch a file's document tree, style metadata, and inline variables."""
        return self._get(
            f"/files/{quote(file_key, safe='')}",
            credential,
            timeout_s=self.file_timeout_s,
        )

    def get_nodes(self, file_key: str, node_ids: list[str], credential: str) -> dict:
        """Fetch several nodes by id in a single request.

        Returns:
            The raw response, shaped {"nodes": {node_id: {"document": {...}}}}.
        """
        return self._get(
            f"/files/{quote(file_key, safe='')}/nodes",
            credential,
            timeout_s=self.nodes_timeout_s,
            params={"ids": ",".join(node_ids)},
        )

    def get_local_variables(self, file_key: str, credential: str) -> dict:
        """Fetch the file's local variables and variable collections.

        Returns:
            The raw response, shaped {"meta": {"variableCollections": ..., "variables": ...}}.
        """
        return self._get(
            f"/files/{quote(file_key, safe='')}/variables/local",
            credential,
            timeout_s=self.variables_timeout_s,
        )

    def _get(
        self,
        path: str,
        credential: str,
        timeout_s: float,
        params: dict[str, str] | None = None,
    ) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.http_client.get(
                url,
                params=params,
                headers={TOKEN_HEADER: credential},
                timeout=httpx.Timeout(timeout_s, connect=min(CONNECT_TIMEOUT_S, timeout_s)),
            )
        except httpx.TimeoutException as e:
            logger.warning("figma_request_timeout", path=path, timeout_s=timeout_s)
            raise FigmaApiError(
                None, f"Figma API request timed out after {timeout_s:g}s", timed_out=True
            ) from e
        except httpx.HTTPError as e:
            logger.warning("figma_request_failed", path=path, error=str(e))
            raise FigmaApiError(None, f"Figma API request failed: {e}") from e

        if not response.is_success:
            message = _describe_error_response(response)
            logger.warning("figma_request_rejected", path=path, status_code=response.status_code)
            raise FigmaApiError(response.status_code, message)

        try:
            body = response.json()
        except ValueError as e:
            raise FigmaApiError(
                response.status_code, "Figma API returned a body that is not JSON"
            ) from e
        if not isinstance(body, dict):
            raise FigmaApiError(response.status_code, "Figma API returned an unexpected body")
        return body
