"""Abstract interfaces for external dependencies."""
from pdf_outlines.core.ports.store import ObjectStorePort
from pdf_outlines.core.ports.pdf import OutlinePDFPort

__all__ = [
    "ObjectStorePort",
    "OutlinePDFPort",
]
