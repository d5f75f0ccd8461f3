"""PDF port interface.

Defines the contract for moving an outline tree in and out of PDF files.
Core code depends only on this abstraction, not on specific implementations
like PyMuPDF.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from pdf_outlines.core.ports.store import ObjectStorePort

if TYPE_CHECKING:
    from pdf_outlines.core.outline import OutlineRoot


class OutlinePDFPort(ABC):
    """Abstract interface for PDF outline import and export.

    Implementations: PyMuPDFOutlineAdapter
    """

    @abstractmethod
    def read_outline(self, path: str, store: ObjectStorePort) -> "OutlineRoot":
        """Build an outline tree from the outline of a PDF.

        Args:
            path: Path to PDF file
            store: Store that receives the backing records

        Returns:
            Root of the new tree
        """
        pass

    @abstractmethod
    def write_outline(
        self, root: "OutlineRoot", path: str, output_path: Optional[str] = None
    ) -> None:
        """Replace the outline of a PDF with the given tree.

        Args:
            root: Tree to write
            path: Path to source PDF file
            output_path: Where to save; None saves incrementally in place
        """
        pass
