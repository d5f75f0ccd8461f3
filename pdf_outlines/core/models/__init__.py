"""Domain models: outline value types and record layout."""

from pdf_outlines.core.models.outline import (
    BLACK,
    Destination,
    OutlineFormat,
    TextColor,
)

__all__ = [
    "BLACK",
    "Destination",
    "OutlineFormat",
    "TextColor",
]
