"""
Document catalog access to the outline tree.

The catalog record holds a reference to the outlines record; this is the
only entry point callers should use to reach the tree.
"""
import logging
from typing import Any, Dict, Optional

from pdf_outlines.core.exceptions import StructuralIntegrityError
from pdf_outlines.core.outline import OutlineRoot
from pdf_outlines.core.ports.store import ObjectStorePort

logger = logging.getLogger(__name__)

CATALOG_TYPE = "Catalog"
OUTLINES_KEY = "Outlines"


class OutlineDocument:
    """A document catalog and its (optional) outline tree."""

    def __init__(self, store: ObjectStorePort, catalog_ref: Optional[int] = None):
        """Attach to a catalog record, creating one when no reference is given.

        Args:
            store: Store holding the document records
            catalog_ref: Reference of an existing catalog record
        """
        self._store = store
        if catalog_ref is None:
            catalog_ref = store.create_record({"Type": CATALOG_TYPE})
        elif not store.has_record(catalog_ref):
            raise StructuralIntegrityError(f"Catalog record {catalog_ref} does not exist", ref=catalog_ref)
        self._catalog_ref = catalog_ref
        self._outlines: Optional[OutlineRoot] = None

    @property
    def catalog_ref(self) -> int:
        return self._catalog_ref

    @property
    def store(self) -> ObjectStorePort:
        return self._store

    def get_outlines(self, create: bool = False, **load_options: Any) -> Optional[OutlineRoot]:
        """Get the outline root of this document.

        Args:
            create: Create an empty outline when the document has none
            **load_options: max_depth / max_items passed to OutlineRoot.load

        Returns:
            The cached root, a freshly loaded or created one, or None
        """
        if self._outlines is not None and self._outlines.is_alive:
            return self._outlines
        self._outlines = None

        ref = self._store.get_field(self._catalog_ref, OUTLINES_KEY)
        if ref is not None:
            outlines = OutlineRoot.load(self._store, ref, **load_options)
        elif create:
            outlines = OutlineRoot.create(self._store)
            self._store.set_field(self._catalog_ref, OUTLINES_KEY, outlines.ref)
            logger.info(f"Created outlines {outlines.ref} for catalog {self._catalog_ref}")
        else:
            return None

        outlines.on_erase(self._detach_outlines)
        self._outlines = outlines
        return outlines

    def erase_outlines(self) -> bool:
        """Erase the whole outline tree and unlink it from the catalog.

        Returns:
            True if the document had an outline to erase
        """
        outlines = self.get_outlines()
        if outlines is None:
            return False
        outlines.erase()
        return True

    def _detach_outlines(self) -> None:
        # Runs from OutlineRoot.erase once the outlines record is gone
        self._store.delete_field(self._catalog_ref, OUTLINES_KEY)
        logger.info(f"Removed outlines from catalog {self._catalog_ref}")

    def to_dict(self) -> Dict[str, Any]:
        """Nested dict view of the outline, for inspection and JSON output."""
        outlines = self.get_outlines()
        if outlines is None:
            return {"outlines": None}

        def describe(item) -> Dict[str, Any]:
            destination = item.destination
            color = item.text_color
            return {
                "title": item.title,
                "destination": destination.to_record() if destination else None,
                "format": item.text_format.name,
                "color": [color.red, color.green, color.blue],
                "open": item.is_open,
                "children": [],
            }

        top: list = []
        # walk() is pre-order, so the last node seen at level - 1 is the parent
        by_level: Dict[int, Dict[str, Any]] = {}
        for level, item in outlines.walk():
            node = describe(item)
            if level == 1:
                top.append(node)
            else:
                by_level[level - 1]["children"].append(node)
            by_level[level] = node
        return {"outlines": {"count": outlines.count, "items": top}}
