"""
Outline value types and backing record layout.

Values stored in a backing record are plain JSON-compatible data
(ints, floats, strings, lists, dicts) so any ObjectStorePort
implementation can persist them without knowing these types.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional

from pdf_outlines.core.exceptions import MalformedRecordError, ValidationError

# Backing record field names
TYPE = "Type"
TITLE = "Title"
DEST = "Dest"
FORMAT = "F"
COLOR = "C"
COUNT = "Count"
PARENT = "Parent"
PREV = "Prev"
NEXT = "Next"
FIRST = "First"
LAST = "Last"

OUTLINES_TYPE = "Outlines"


class OutlineFormat(IntEnum):
    """Title style of an outline item: two independent bits."""
    DEFAULT = 0x00
    ITALIC = 0x01
    BOLD = 0x02
    BOLD_ITALIC = 0x03

    @classmethod
    def from_flags(cls, bold: bool = False, italic: bool = False) -> "OutlineFormat":
        return cls((cls.BOLD if bold else 0) | (cls.ITALIC if italic else 0))

    @classmethod
    def coerce(cls, value: Any) -> "OutlineFormat":
        """Convert an int-like value, rejecting undefined bit patterns."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"Invalid outline format: {value!r}")
        try:
            return cls(value)
        except ValueError as e:
            raise ValidationError(f"Invalid outline format: {value!r}") from e

    @property
    def bold(self) -> bool:
        return bool(self & OutlineFormat.BOLD)

    @property
    def italic(self) -> bool:
        return bool(self & OutlineFormat.ITALIC)


@dataclass(frozen=True)
class TextColor:
    """RGB title color, each channel in [0.0, 1.0]."""

    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0

    def __post_init__(self):
        for name in ("red", "green", "blue"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"Color channel {name} must be a number, got {value!r}")
            if not 0.0 <= value <= 1.0:
                raise ValidationError(f"Color channel {name} out of range: {value}")
            object.__setattr__(self, name, float(value))

    def to_record(self) -> List[float]:
        return [self.red, self.green, self.blue]

    @classmethod
    def from_record(cls, value: Any, ref=None) -> "TextColor":
        if not isinstance(value, (list, tuple)) or len(value) != 3:
            raise MalformedRecordError(f"Record {ref} has invalid color: {value!r}", ref=ref)
        try:
            return cls(*value)
        except ValidationError as e:
            raise MalformedRecordError(f"Record {ref} has invalid color: {e}", ref=ref) from e


BLACK = TextColor()


@dataclass(frozen=True)
class Destination:
    """
    Location inside the document an outline item navigates to.

    The outline tree stores and returns destinations unexamined;
    page is 1-indexed, coordinates and zoom are optional.
    """

    page: int
    left: Optional[float] = None
    top: Optional[float] = None
    zoom: Optional[float] = None

    def __post_init__(self):
        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 1:
            raise ValidationError(f"Destination page must be a positive int, got {self.page!r}")

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {"page": self.page}
        for name in ("left", "top", "zoom"):
            value = getattr(self, name)
            if value is not None:
                record[name] = value
        return record

    @classmethod
    def from_record(cls, value: Any, ref=None) -> "Destination":
        if not isinstance(value, dict) or "page" not in value:
            raise MalformedRecordError(f"Record {ref} has invalid destination: {value!r}", ref=ref)
        try:
            return cls(
                page=value["page"],
                left=value.get("left"),
                top=value.get("top"),
                zoom=value.get("zoom"),
            )
        except ValidationError as e:
            raise MalformedRecordError(f"Record {ref} has invalid destination: {e}", ref=ref) from e
