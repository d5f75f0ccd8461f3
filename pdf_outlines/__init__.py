"""Outline (bookmark) trees kept in sync with a persistent record store."""
from pdf_outlines.core.document import OutlineDocument
from pdf_outlines.core.exceptions import (
    CoreError,
    MalformedRecordError,
    OutlineError,
    PDFError,
    StaleReferenceError,
    StorageError,
    StructuralIntegrityError,
    ValidationError,
)
from pdf_outlines.core.models import BLACK, Destination, OutlineFormat, TextColor
from pdf_outlines.core.outline import OutlineItem, OutlineRoot

__all__ = [
    "OutlineDocument",
    "OutlineItem",
    "OutlineRoot",
    "Destination",
    "OutlineFormat",
    "TextColor",
    "BLACK",
    "CoreError",
    "OutlineError",
    "StructuralIntegrityError",
    "MalformedRecordError",
    "StaleReferenceError",
    "StorageError",
    "PDFError",
    "ValidationError",
]
