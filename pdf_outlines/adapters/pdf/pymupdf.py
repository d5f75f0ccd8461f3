"""PyMuPDF adapter.

Implements OutlinePDFPort interface using fitz (PyMuPDF).
Composes the toc module for tree conversion.
"""
import logging
from typing import Optional

import fitz

from pdf_outlines.adapters.pdf import toc as toc_conversion
from pdf_outlines.core.exceptions import PDFError
from pdf_outlines.core.outline import OutlineRoot
from pdf_outlines.core.ports.pdf import OutlinePDFPort
from pdf_outlines.core.ports.store import ObjectStorePort

logger = logging.getLogger(__name__)


class PyMuPDFOutlineAdapter(OutlinePDFPort):
    """PyMuPDF implementation of OutlinePDFPort.

    Directly uses fitz library for PDF operations.
    """

    def read_outline(self, path: str, store: ObjectStorePort) -> OutlineRoot:
        """Build an outline tree from the outline of a PDF.

        Args:
            path: Path to PDF file
            store: Store that receives the backing records

        Returns:
            Root of the new tree
        """
        try:
            with fitz.open(path) as doc:
                toc = doc.get_toc(simple=False)
        except Exception as e:
            raise PDFError(f"Failed to read outline from {path}: {e}") from e

        root = toc_conversion.toc_to_tree(store, toc)
        logger.info(f"Read {len(root)} outline items from {path}")
        return root

    def write_outline(
        self, root: OutlineRoot, path: str, output_path: Optional[str] = None
    ) -> None:
        """Replace the outline of a PDF with the given tree.

        Args:
            root: Tree to write
            path: Path to source PDF file
            output_path: Where to save; None saves incrementally in place
        """
        toc = toc_conversion.tree_to_toc(root)
        try:
            with fitz.open(path) as doc:
                doc.set_toc(toc)
                if output_path is None:
                    doc.save(path, incremental=True, encryption=fitz.PDF_ENCRYPT_KEEP)
                else:
                    doc.save(output_path)
        except Exception as e:
            raise PDFError(f"Failed to write outline to {output_path or path}: {e}") from e
        logger.info(f"Wrote {len(toc)} outline items to {output_path or path}")
