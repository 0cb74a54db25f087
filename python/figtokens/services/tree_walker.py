"""Style value discovery over a Figma document tree.

Figma reports styles in two places that are never joined for us:
- the file's `styles` block: id -> {name, styleType}, no values
- each node's `styles` map: {"fill": id, "text": id, ...}, next to the
  node's own fills / strokes / style / effects

walk_document() visits every node and copies the node's values into the
definition its `styles` map points at, using a fixed key -> field mapping:

    fill   -> fills (and fills[0].color as the scalar color)
    stroke -> strokes
    text   -> style, stored as textStyle
    effect -> effects

The first node to supply a field wins. The scalar color is only ever
taken from the node that supplied `fills`. Unknown style ids, unmapped keys,
and missing or empty value fields are ignored.
"""

from collections.abc import Mapping
from typing import Any

from figtokens.services.token_types import StyleDefinition

FILL = "fill"
STROKE = "stroke"
TEXT = "text"
EFFECT = "effect"


def apply_style_values(
    definition: StyleDefinition, style_key: str, node: Mapping[str, Any]
) -> bool:
    """Copy the values a node carries for one style key into a definition.

    Args:
        definition: The definition to enrich.
        style_key: One of fill / stroke / text / effect (case-insensitive).
        node: The node supplying the values.

    Returns:
        True if at least one field was populated by this call.
    """
    key = style_key.lower()
    updated = False

    if key == FILL:
        fills = node.get("fills")
        if fills and isinstance(fills, list) and definition.fills is None:
            definition.fills = fills
            first = fills[0]
            if isinstance(first, dict) and first.get("color"):
                definition.color = first["color"]
            updated = True
    elif key == STROKE:
        strokes = node.get("strokes")
        if strokes and definition.strokes is None:
            definition.strokes = strokes
            updated = True
    elif key == TEXT:
        text_style = node.get("style")
        if text_style and definition.text_style is None:
            definition.text_style = text_style
            updated = True
    elif key == EFFECT:
        effects = node.get("effects")
        if effects and definition.effects is None:
            definition.effects = effects
            updated = True

    return updated


def walk_document(node: Any, definitions: Mapping[str, StyleDefinition]) -> int:
    """Walk a node tree depth-first, pre-order, enriching definitions in place.

    Uses an explicit stack, so document depth is bounded only by memory.

    Args:
        node: The root node (usually the file's `document`).
        definitions: Style definitions keyed by style id.

    Returns:
        Number of nodes visited.
    """
    if not definitions:
        return 0

    visited = 0
    stack = [node]
    while stack:
        current = stack.pop()
        if not isinstance(current, dict):
            continue
        visited += 1

        styles = current.get("styles")
        if isinstance(styles, dict):
            for style_key, style_id in styles.items():
                definition = definitions.get(style_id) if isinstance(style_id, str) else None
                if definition is not None:
                    apply_style_values(definition, style_key, current)

        children = current.get("children")
        if isinstance(children, list):
            # Reversed so the first child is popped first
            stack.extend(reversed(children))

    return visited
