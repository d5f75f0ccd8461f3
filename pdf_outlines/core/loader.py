"""
OutlineLoader - rebuilds an outline tree from stored records.

Traversal is driven only by the references stored in the records:
starting at a record's First, the Next chain is walked in order and each
item's own children are loaded before moving on to its next sibling.
An explicit stack replaces recursion so deep outlines cannot exhaust
the call stack.

Nothing is repaired: any inconsistency aborts the load.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional, Set

from pdf_outlines.config.settings import get_settings
from pdf_outlines.core.exceptions import (
    MalformedRecordError,
    StructuralIntegrityError,
    ValidationError,
)
from pdf_outlines.core.models import outline as fields
from pdf_outlines.core.models.outline import Destination, OutlineFormat, TextColor
from pdf_outlines.core.outline import OutlineRoot, _Links
from pdf_outlines.core.ports.store import ObjectStorePort

logger = logging.getLogger(__name__)


def _is_ref(value: Any) -> bool:
    # bool is an int subclass, but True is not a record reference
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class _ChainCursor:
    """Progress through the child chain of one parent."""
    parent: int
    cursor: Optional[int]
    depth: int
    prev: Optional[int] = None


class OutlineLoader:
    """Materialize the items below an outlines record."""

    def __init__(
        self,
        store: ObjectStorePort,
        max_depth: Optional[int] = None,
        max_items: Optional[int] = None,
    ):
        """Initialize loader.

        Args:
            store: Store holding the records
            max_depth: Deepest nesting accepted (defaults to settings)
            max_items: Most items accepted (defaults to settings)
        """
        settings = get_settings()
        self._store = store
        self._max_depth = max_depth if max_depth is not None else settings.max_load_depth
        self._max_items = max_items if max_items is not None else settings.max_load_items

    def load(self, root: OutlineRoot) -> None:
        """Populate root with every item reachable from its record.

        Raises:
            StructuralIntegrityError: Dangling reference, cycle, bad Parent/Last,
                                      or a limit exceeded
            MalformedRecordError: Missing title or invalid attribute value
        """
        try:
            self._load(root)
        except (StructuralIntegrityError, MalformedRecordError) as e:
            logger.error(f"Failed to load outline {root.ref}: {e}")
            raise
        logger.info(f"Loaded outline {root.ref} with {len(root)} items")

    def _load(self, root: OutlineRoot) -> None:
        root_ref = root.ref
        if not self._store.has_record(root_ref):
            raise StructuralIntegrityError(f"Outlines record {root_ref} does not exist", ref=root_ref)
        record_type = self._store.get_field(root_ref, fields.TYPE)
        if record_type is not None and record_type != fields.OUTLINES_TYPE:
            raise MalformedRecordError(
                f"Record {root_ref} has Type {record_type!r}, expected {fields.OUTLINES_TYPE!r}",
                ref=root_ref,
            )

        visited: Set[int] = {root_ref}
        stack = [self._open_chain(root_ref, depth=1)]

        while stack:
            chain = stack[-1]
            ref = chain.cursor
            if ref is None:
                self._close_chain(root, chain)
                stack.pop()
                continue

            self._materialize(root, ref, chain, visited)
            chain.prev = ref
            chain.cursor = self._store.get_field(ref, fields.NEXT)

            if self._store.get_field(ref, fields.FIRST) is not None:
                stack.append(self._open_chain(ref, depth=chain.depth + 1))
            elif self._store.get_field(ref, fields.LAST) is not None:
                raise StructuralIntegrityError(f"Record {ref} has Last but no First", ref=ref)

    def _open_chain(self, parent: int, depth: int) -> _ChainCursor:
        first = self._store.get_field(parent, fields.FIRST)
        if first is not None and depth > self._max_depth:
            raise StructuralIntegrityError(
                f"Outline below record {parent} exceeds maximum depth {self._max_depth}",
                ref=parent,
            )
        return _ChainCursor(parent=parent, cursor=first, depth=depth)

    def _close_chain(self, root: OutlineRoot, chain: _ChainCursor) -> None:
        """Check the stored Last and total up descendants once a chain is done."""
        stored_last = self._store.get_field(chain.parent, fields.LAST)
        if stored_last != chain.prev or (stored_last is not None and not _is_ref(stored_last)):
            raise StructuralIntegrityError(
                f"Record {chain.parent} has Last {stored_last}, but its child chain ends at {chain.prev}",
                ref=chain.parent,
            )

        links = root._links[chain.parent]
        descendants = 0
        ref = links.first
        while ref is not None:
            child = root._links[ref]
            descendants += 1 + child.descendants
            ref = child.next
        links.descendants = descendants

    def _materialize(
        self, root: OutlineRoot, ref: int, chain: _ChainCursor, visited: Set[int]
    ) -> None:
        if not _is_ref(ref) or not self._store.has_record(ref):
            raise StructuralIntegrityError(
                f"Record {chain.prev if chain.prev is not None else chain.parent} "
                f"references missing record {ref!r}",
                ref=chain.prev if chain.prev is not None else chain.parent,
            )
        if ref in visited:
            raise StructuralIntegrityError(f"Record {ref} is reachable more than once (cycle)", ref=ref)
        if len(visited) > self._max_items:  # visited includes the root
            raise StructuralIntegrityError(
                f"Outline {root.ref} exceeds maximum of {self._max_items} items", ref=root.ref
            )
        visited.add(ref)

        self._validate(ref)
        stored_parent = self._store.get_field(ref, fields.PARENT)
        if stored_parent is not None and (not _is_ref(stored_parent) or stored_parent != chain.parent):
            raise StructuralIntegrityError(
                f"Record {ref} has Parent {stored_parent}, but is a child of {chain.parent}",
                ref=ref,
            )

        count = self._store.get_field(ref, fields.COUNT, 0)
        root._register(
            ref,
            _Links(parent=chain.parent, prev=chain.prev, is_open=not (isinstance(count, int) and count < 0)),
        )
        if chain.prev is not None:
            root._links[chain.prev].next = ref
        else:
            root._links[chain.parent].first = ref
        root._links[chain.parent].last = ref

    def _validate(self, ref: int) -> None:
        """Reject records with a missing title or unusable attributes."""
        title = self._store.get_field(ref, fields.TITLE)
        if title is None:
            raise MalformedRecordError(f"Record {ref} has no Title", ref=ref)
        if not isinstance(title, str):
            raise MalformedRecordError(f"Record {ref} has non-string Title: {title!r}", ref=ref)

        text_format = self._store.get_field(ref, fields.FORMAT)
        if text_format is not None:
            try:
                OutlineFormat.coerce(text_format)
            except ValidationError as e:
                raise MalformedRecordError(f"Record {ref}: {e}", ref=ref) from e

        color = self._store.get_field(ref, fields.COLOR)
        if color is not None:
            TextColor.from_record(color, ref=ref)

        dest = self._store.get_field(ref, fields.DEST)
        if dest is not None:
            Destination.from_record(dest, ref=ref)
