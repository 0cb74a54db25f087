"""Style enrichment: metadata + document tree + direct node fetch.

Steps:
1. Build StyleDefinitions from the file's `styles` metadata block.
2. Walk the document tree to pick up values from nodes using each style.
3. If no definition ended up with a value for its own category, fetch up
   to `fetch_limit` style nodes in one batched call and copy their values.
4. Convert every definition (valued or not) into a TokenEntryData.

The direct fetch never raises. Its failure is returned as an
EnrichmentError on the StyleEnrichment result; the orchestrator decides
what to do with it.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from figtokens.logging import get_logger
from figtokens.services.figma_client import FigmaApiError, FigmaClient
from figtokens.services.token_types import StyleDefinition, TokenEntryData
from figtokens.services.tree_walker import apply_style_values, walk_document

logger = get_logger(__name__)

# Max style ids sent in the direct-fetch fallback
DEFAULT_FETCH_LIMIT = 10


@dataclass
class EnrichmentError:
    """Failure of the direct style-node fetch."""

    message: str
    status_code: int | None = None
    style_ids: list[str] = field(default_factory=list)


@dataclass
class StyleNodeBatch:
    """Nodes returned by the direct style-node fetch, keyed by style id."""

    nodes: dict[str, dict[str, Any]]


@dataclass
class StyleEnrichment:
    """Result of enriching a file's styles.

    Attributes:
        entries: One token entry per style definition, in metadata order.
        valued_count: Definitions holding a value for their own category.
        fallback_style_ids: Ids sent to the direct fetch (empty if not attempted).
        fallback_error: Set when the direct fetch was attempted and failed.
    """

    entries: list[TokenEntryData]
    valued_count: int
    fallback_style_ids: list[str] = field(default_factory=list)
    fallback_error: EnrichmentError | None = None

    @property
    def fallback_attempted(self) -> bool:
        return bool(self.fallback_style_ids)


def build_style_definitions(styles: Any) -> dict[str, StyleDefinition]:
    """Build definitions from a file's `styles` block (id -> metadata)."""
    if not isinstance(styles, Mapping):
        return {}
    return {
        style_id: StyleDefinition.from_metadata(style_id, metadata)
        for style_id, metadata in styles.items()
        if isinstance(style_id, str) and style_id
    }


def count_valued(definitions: Mapping[str, StyleDefinition]) -> int:
    return sum(1 for definition in definitions.values() if definition.has_value())


def fetch_style_nodes(
    client: FigmaClient,
    file_key: str,
    style_ids: list[str],
    credential: str,
) -> StyleNodeBatch | EnrichmentError:
    """Fetch style nodes by id in one batched call.

    Returns:
        StyleNodeBatch on success, EnrichmentError on any failure.

    Note:
        This function never raises for expected failure modes.
    """
    try:
        response = client.get_nodes(file_key, style_ids, credential)
    except FigmaApiError as e:
        return EnrichmentError(message=e.message, status_code=e.status_code, style_ids=style_ids)

    raw_nodes = response.get("nodes")
    if not isinstance(raw_nodes, dict):
        return EnrichmentError(
            message="Figma nodes response missing 'nodes' field",
            style_ids=style_ids,
        )

    nodes: dict[str, dict[str, Any]] = {}
    for node_id, wrapper in raw_nodes.items():
        # Figma answers null for ids it cannot resolve
        if isinstance(wrapper, dict) and isinstance(wrapper.get("document"), dict):
            nodes[node_id] = wrapper["document"]
    return StyleNodeBatch(nodes=nodes)


def apply_style_nodes(
    definitions: Mapping[str, StyleDefinition], batch: StyleNodeBatch
) -> int:
    """Copy values from fetched style nodes into their definitions.

    Each node is read according to its definition's own style type.

    Returns:
        Number of definitions that gained a value.
    """
    enriched = 0
    for node_id, node in batch.nodes.items():
        definition = definitions.get(node_id)
        if definition is None or not definition.style_type:
            continue
        if apply_style_values(definition, definition.style_type, node):
            enriched += 1
    return enriched


def enrich_styles(
    client: FigmaClient,
    file_key: str,
    styles: Any,
    document: Any,
    credential: str,
    fetch_limit: int = DEFAULT_FETCH_LIMIT,
) -> StyleEnrichment:
    """Turn a file's style metadata into valued token entries.

    Args:
        client: Figma API client used for the direct-fetch fallback.
        file_key: Key of the file being imported.
        styles: The file response's `styles` block.
        document: The file response's `document` root node.
        credential: Figma personal access token, passed through.
        fetch_limit: Max style ids sent to the direct fetch.

    Returns:
        StyleEnrichment with one entry per style definition.
    """
    definitions = build_style_definitions(styles)
    if not definitions:
        return StyleEnrichment(entries=[], valued_count=0)

    visited = walk_document(document, definitions)
    valued = count_valued(definitions)
    logger.info(
        "style_tree_walk_completed",
        style_count=len(definitions),
        valued_count=valued,
        nodes_visited=visited,
    )

    fallback_ids: list[str] = []
    fallback_error: EnrichmentError | None = None
    if valued == 0:
        fallback_ids = list(definitions)[:fetch_limit]
        result = fetch_style_nodes(client, file_key, fallback_ids, credential)
        if isinstance(result, EnrichmentError):
            fallback_error = result
        else:
            enriched = apply_style_nodes(definitions, result)
            valued = count_valued(definitions)
            logger.info(
                "style_fallback_completed",
                requested=len(fallback_ids),
                returned=len(result.nodes),
                enriched=enriched,
            )

    return StyleEnrichment(
        entries=[definition.to_token_entry() for definition in definitions.values()],
        valued_count=valued,
        fallback_style_ids=fallback_ids,
        fallback_error=fallback_error,
    )
