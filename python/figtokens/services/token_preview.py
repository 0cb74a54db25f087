"""Display previews derived from stored token payloads.

Fill styles with a scalar color get hex / rgba strings; text styles get the
typographic fields a style guide shows. Everything else has no preview.
"""

from typing import Any

TEXT_PREVIEW_FIELDS = ("fontFamily", "fontWeight", "fontSize", "lineHeightPx", "letterSpacing")


def _channel(value: Any) -> int:
    try:
        scaled = round(float(value) * 255)
    except (TypeError, ValueError):
        return 0
    return max(0, min(255, scaled))


def color_preview(color: Any) -> dict[str, Any] | None:
    """Render a Figma RGBA color (0..1 channels) as hex and rgba strings."""
    if not isinstance(color, dict):
        return None
    r, g, b = (_channel(color.get(c)) for c in ("r", "g", "b"))
    alpha = color.get("a", 1)
    if not isinstance(alpha, (int, float)):
        alpha = 1
    return {
        "hex": f"#{r:02x}{g:02x}{b:02x}",
        "rgba": f"rgba({r}, {g}, {b}, {alpha:g})",
        "opacity": alpha,
    }


def text_preview(text_style: Any) -> dict[str, Any] | None:
    if not isinstance(text_style, dict):
        return None
    preview = {
        key: text_style[key] for key in TEXT_PREVIEW_FIELDS if text_style.get(key) is not None
    }
    return preview or None


def build_preview(category: str, raw_payload: Any) -> dict[str, Any] | None:
    """Return a preview for a token, or None if it has nothing renderable."""
    if not isinstance(raw_payload, dict):
        return None
    if category == "STYLE_FILL":
        return color_preview(raw_payload.get("color"))
    if category == "STYLE_TEXT":
        return text_preview(raw_payload.get("textStyle"))
    return None
