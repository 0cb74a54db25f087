"""Data types shared by the token extraction pipeline.

StyleDefinition is the mutable, extraction-time view of one Figma style:
it starts as the metadata found in the file's `styles` block and collects
visual values as the document tree (or the direct node fetch) reveals them.

TokenEntryData is the normalized shape handed from extraction to the
synchronization writer, one per style or variable.
"""

from dataclasses import dataclass, field
from typing import Any

STYLE_CATEGORY_PREFIX = "STYLE_"
VARIABLE_CATEGORY_PREFIX = "VARIABLE_"

UNNAMED_STYLE = "Unnamed Style"
UNNAMED_VARIABLE = "Unnamed Variable"


@dataclass
class TokenEntryData:
    """A token ready to be persisted.

    Attributes:
        token_id: Figma style or variable id, unique within a file.
        name: Display name of the token.
        category: STYLE_<styleType> or VARIABLE_<resolvedType>.
        raw_payload: Category-specific value data, stored as JSON.
    """

    token_id: str
    name: str
    category: str
    raw_payload: dict[str, Any]


@dataclass
class StyleDefinition:
    """A style known from file metadata, enriched with discovered values."""

    style_id: str
    name: str
    style_type: str | None
    metadata: dict[str, Any] = field(default_factory=dict)

    # Discovered values, named after the keys they are serialized under
    color: dict[str, Any] | None = None
    fills: list[Any] | None = None
    text_style: dict[str, Any] | None = None
    strokes: list[Any] | None = None
    effects: list[Any] | None = None

    @classmethod
    def from_metadata(cls, style_id: str, metadata: Any) -> "StyleDefinition":
        """Build a definition from one entry of a file's `styles` block."""
        if not isinstance(metadata, dict):
            metadata = {}
        style_type = metadata.get("styleType")
        return cls(
            style_id=style_id,
            name=metadata.get("name") or UNNAMED_STYLE,
            style_type=style_type if isinstance(style_type, str) and style_type else None,
            metadata=dict(metadata),
        )

    @property
    def category(self) -> str:
        return STYLE_CATEGORY_PREFIX + (self.style_type or "UNKNOWN").upper()

    def has_value(self) -> bool:
        """Whether a value for this style's own category has been found."""
        style_type = (self.style_type or "").upper()
        if style_type == "FILL":
            return self.color is not None or self.fills is not None
        if style_type == "TEXT":
            return self.text_style is not None
        if style_type == "EFFECT":
            return self.effects is not None
        return self.strokes is not None

    def to_payload(self) -> dict[str, Any]:
        """Serialize metadata plus every discovered value field."""
        payload = dict(self.metadata)
        values = {
            "color": self.color,
            "fills": self.fills,
            "textStyle": self.text_style,
            "strokes": self.strokes,
            "effects": self.effects,
        }
        payload.update({key: value for key, value in values.items() if value is not None})
        return payload

    def to_token_entry(self) -> TokenEntryData:
        return TokenEntryData(
            token_id=self.style_id,
            name=self.name,
            category=self.category,
            raw_payload=self.to_payload(),
        )
