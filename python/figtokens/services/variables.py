"""Figma variable extraction.

Two sources:
- inline: a file response's `variables` block, mapped as-is
- dedicated: GET /files/{key}/variables/local, used only when the file
  response produced no tokens at all

The dedicated endpoint is treated as an optional capability. Its failures
are raised as typed errors so the orchestrator can tell "the token lacks
the variables scope" (VariablesUnauthorizedError) apart from "the endpoint
gave us nothing usable" (VariablesUnavailableError).
"""

from collections.abc import Mapping
from typing import Any

from figtokens.errors import VariablesUnauthorizedError, VariablesUnavailableError
from figtokens.logging import get_logger
from figtokens.services.figma_client import FigmaApiError, FigmaClient
from figtokens.services.token_types import (
    UNNAMED_VARIABLE,
    VARIABLE_CATEGORY_PREFIX,
    TokenEntryData,
)

logger = get_logger(__name__)


def variable_category(resolved_type: Any) -> str:
    if not isinstance(resolved_type, str) or not resolved_type:
        resolved_type = "UNKNOWN"
    return VARIABLE_CATEGORY_PREFIX + resolved_type.upper()


def inline_variable_entries(variables: Any) -> list[TokenEntryData]:
    """Map a file response's inline `variables` block (id -> variable)."""
    if not isinstance(variables, Mapping):
        return []

    entries = []
    for variable_id, variable in variables.items():
        if not isinstance(variable, dict):
            continue
        entries.append(
            TokenEntryData(
                token_id=variable_id,
                name=variable.get("name") or UNNAMED_VARIABLE,
                category=variable_category(variable.get("resolvedType")),
                raw_payload=dict(variable),
            )
        )
    return entries


def map_local_variables(
    collections: Mapping[str, Any], variables: Mapping[str, Any]
) -> list[TokenEntryData]:
    """Join variables to their collections and emit one entry per variable.

    Entries are grouped by collection, in collection order. Variables that
    reference an unknown collection are skipped.
    """
    by_collection: dict[str, list[tuple[str, dict]]] = {}
    for variable_id, variable in variables.items():
        if not isinstance(variable, dict):
            continue
        collection_id = variable.get("variableCollectionId")
        if not isinstance(collection_id, str):
            continue
        by_collection.setdefault(collection_id, []).append((variable_id, variable))

    entries = []
    for collection_id, collection in collections.items():
        collection_name = collection.get("name") if isinstance(collection, dict) else None
        for variable_id, variable in by_collection.get(collection_id, []):
            resolved_type = variable.get("resolvedType")
            entries.append(
                TokenEntryData(
                    token_id=variable_id,
                    name=variable.get("name") or UNNAMED_VARIABLE,
                    category=variable_category(resolved_type),
                    raw_payload={
                        "collection": collection_name,
                        "resolvedType": resolved_type,
                        "valuesByMode": variable.get("valuesByMode") or {},
                        "scopes": variable.get("scopes") or [],
                        "hiddenFromPublishing": bool(variable.get("hiddenFromPublishing", False)),
                    },
                )
            )
    return entries


def fetch_variables(client: FigmaClient, file_key: str, credential: str) -> list[TokenEntryData]:
    """Fetch variables from the dedicated local-variables endpoint.

    Returns:
        One token entry per variable whose collection is known.

    Raises:
        VariablesUnauthorizedError: The endpoint answered HTTP 403.
        VariablesUnavailableError: Any other failure, or a response without
            collections or variables.
    """
    try:
        response = client.get_local_variables(file_key, credential)
    except FigmaApiError as e:
        if e.status_code == 403:
            raise VariablesUnauthorizedError() from e
        if e.status_code is not None:
            raise VariablesUnavailableError(f"Variables API returned HTTP {e.status_code}") from e
        raise VariablesUnavailableError(e.message) from e

    meta = response.get("meta")
    if not meta or not isinstance(meta, dict):
        raise VariablesUnavailableError("Variables API response missing 'meta' field.")

    collections = meta.get("variableCollections")
    if not collections or not isinstance(collections, dict):
        raise VariablesUnavailableError("No variable collections found.")

    variables = meta.get("variables")
    if not variables or not isinstance(variables, dict):
        raise VariablesUnavailableError("No variables found.")

    logger.info(
        "local_variables_fetched",
        collection_count=len(collections),
        variable_count=len(variables),
    )

    entries = map_local_variables(collections, variables)
    if len(entries) < len(variables):
        logger.warning(
            "local_variables_without_collection",
            skipped=len(variables) - len(entries),
        )
    return entries
