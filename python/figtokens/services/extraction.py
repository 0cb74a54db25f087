"""Token extraction orchestrator.

Precedence (linear, never loops back):

1. INLINE: styles enriched from the already-fetched document, plus any
   inline `variables` block. No extra request unless the style direct-fetch
   fallback kicks in.
2. DEDICATED_VARIABLES: only when step 1 produced nothing, call the local
   variables endpoint once. Its failures are terminal and reworded so the
   caller can act on them.
3. Nothing from either step -> NoTokensFoundError.
"""

from typing import Any

from figtokens.errors import (
    NoTokensFoundError,
    VariablesUnauthorizedError,
    VariablesUnavailableError,
)
from figtokens.logging import get_logger
from figtokens.services.figma_client import FigmaClient
from figtokens.services.style_enricher import DEFAULT_FETCH_LIMIT, enrich_styles
from figtokens.services.token_types import TokenEntryData
from figtokens.services.variables import fetch_variables, inline_variable_entries

logger = get_logger(__name__)

VARIABLES_FORBIDDEN_MESSAGE = (
    "No styles or variables found. Note: Your Figma token doesn't have permission to "
    "access the Variables API (HTTP 403). The file itself was imported from Figma "
    "successfully, but it has no styles and its variables could not be read. To access "
    "variables, generate a new token with 'File content' read permissions in Figma."
)


def dedupe_entries(entries: list[TokenEntryData]) -> list[TokenEntryData]:
    """Drop repeated token ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique = []
    for entry in entries:
        if entry.token_id in seen:
            continue
        seen.add(entry.token_id)
        unique.append(entry)
    return unique


def extract_tokens(
    client: FigmaClient,
    file_key: str,
    file_document: dict[str, Any],
    credential: str,
    style_fetch_limit: int = DEFAULT_FETCH_LIMIT,
) -> list[TokenEntryData]:
    """Extract every style and variable token from a fetched Figma file.

    Args:
        client: Figma API client for the optional follow-up calls.
        file_key: Key of the file being imported.
        file_document: The full GET /files/{key} response.
        credential: Figma personal access token, passed through.
        style_fetch_limit: Max style ids for the direct-fetch fallback.

    Returns:
        Token entries with unique token ids; styles first, then variables.

    Raises:
        VariablesUnauthorizedError: Fallback endpoint refused the token (403).
        VariablesUnavailableError: Fallback endpoint failed or had no data.
        NoTokensFoundError: Both steps produced nothing.
    """
    enrichment = enrich_styles(
        client,
        file_key,
        file_document.get("styles"),
        file_document.get("document"),
        credential,
        fetch_limit=style_fetch_limit,
    )
    if enrichment.fallback_error is not None:
        error = enrichment.fallback_error
        logger.warning(
            "style_fallback_failed",
            error=error.message,
            status_code=error.status_code,
            requested=len(error.style_ids),
        )

    inline_variables = inline_variable_entries(file_document.get("variables"))
    entries = enrichment.entries + inline_variables
    logger.info(
        "inline_tokens_extracted",
        style_count=len(enrichment.entries),
        valued_style_count=enrichment.valued_count,
        variable_count=len(inline_variables),
        style_fallback_attempted=enrichment.fallback_attempted,
    )

    if not entries:
        logger.info("inline_tokens_empty_trying_variables_api")
        try:
            entries = fetch_variables(client, file_key, credential)
        except VariablesUnauthorizedError as e:
            logger.warning("variables_api_forbidden")
            raise VariablesUnauthorizedError(VARIABLES_FORBIDDEN_MESSAGE) from e
        except VariablesUnavailableError as e:
            logger.warning("variables_api_unavailable", error=e.message)
            raise VariablesUnavailableError(
                f"No styles or variables found in this file. Error: {e.message}"
            ) from e

    if not entries:
        raise NoTokensFoundError()

    return dedupe_entries(entries)
