"""Test data factories.

Builders for Figma API payloads and stored rows, so individual tests only
spell out the fields they care about.
"""

from typing import Any

from sqlalchemy.orm import Session

from figtokens.db.models import DesignFile, TokenEntry
from figtokens.services.figma_client import DEFAULT_BASE_URL

FIGMA_BASE_URL = DEFAULT_BASE_URL
TEST_CREDENTIAL = "figd_test_token"

RED = {"r": 1.0, "g": 0.0, "b": 0.0, "a": 1.0}
BLUE = {"r": 0.0, "g": 0.0, "b": 1.0, "a": 1.0}
BODY_TEXT = {"fontFamily": "Inter", "fontWeight": 400, "fontSize": 16, "lineHeightPx": 24}

# =============================================================================
# Figma payloads
# =============================================================================


def style_meta(name: str, style_type: str, **extra: Any) -> dict[str, Any]:
    """One entry of a file's `styles` block."""
    return {"key": f"key-{name}", "name": name, "styleType": style_type, **extra}


def solid_fill(color: dict[str, Any]) -> list[dict[str, Any]]:
    return [{"type": "SOLID", "color": color}]


def node(
    node_id: str,
    styles: dict[str, str] | None = None,
    children: list[dict[str, Any]] | None = None,
    **values: Any,
) -> dict[str, Any]:
    """A document node, optionally referencing styles and carrying values."""
    result: dict[str, Any] = {"id": node_id, "type": "FRAME", **values}
    if styles is not None:
        result["styles"] = styles
    if children is not None:
        result["children"] = children
    return result


def file_response(
    name: str = "Design System",
    document: dict[str, Any] | None = None,
    styles: dict[str, Any] | None = None,
    variables: dict[str, Any] | None = None,
    thumbnail_url: str | None = "https://s3.figma.test/thumb.png",
) -> dict[str, Any]:
    """A GET /files/{key} response body."""
    body: dict[str, Any] = {
        "name": name,
        "document": document if document is not None else node("0:0", children=[]),
        "styles": styles or {},
    }
    if thumbnail_url is not None:
        body["thumbnailUrl"] = thumbnail_url
    if variables is not None:
        body["variables"] = variables
    return body


def nodes_response(nodes: dict[str, dict[str, Any] | None]) -> dict[str, Any]:
    """A GET /files/{key}/nodes response body; None marks an unresolved id."""
    return {
        "nodes": {
            node_id: ({"document": document} if document is not None else None)
            for node_id, document in nodes.items()
        }
    }


def variable(
    name: str,
    collection_id: str,
    resolved_type: str = "COLOR",
    values_by_mode: dict[str, Any] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    return {
        "name": name,
        "variableCollectionId": collection_id,
        "resolvedType": resolved_type,
        "valuesByMode": values_by_mode if values_by_mode is not None else {"1:0": RED},
        **extra,
    }


def local_variables_response(
    collections: dict[str, Any], variables: dict[str, Any]
) -> dict[str, Any]:
    """A GET /files/{key}/variables/local response body."""
    return {
        "status": 200,
        "error": False,
        "meta": {"variableCollections": collections, "variables": variables},
    }


def styled_file_response(name: str = "Design System") -> dict[str, Any]:
    """A file with one fill and one text style, both valued by the tree."""
    document = node(
        "0:0",
        children=[
            node(
                "1:1",
                styles={"fill": "S:fill"},
                fills=solid_fill(RED),
            ),
            node("1:2", styles={"text": "S:text"}, style=BODY_TEXT),
        ],
    )
    return file_response(
        name=name,
        document=document,
        styles={
            "S:fill": style_meta("Brand/Red", "FILL"),
            "S:text": style_meta("Body", "TEXT"),
        },
    )


# =============================================================================
# Rows
# =============================================================================


def create_design_file(
    session: Session,
    file_key: str = "AbC123",
    name: str = "Design System",
    tokens: list[tuple[str, str, str, dict[str, Any]]] | None = None,
) -> DesignFile:
    """Insert a design file with (token_id, name, category, payload) entries."""
    design_file = DesignFile(file_key=file_key, name=name)
    for token_id, token_name, category, payload in tokens or []:
        design_file.token_entries.append(
            TokenEntry(token_id=token_id, name=token_name, category=category, raw_payload=payload)
        )
    session.add(design_file)
    session.commit()
    return design_file
