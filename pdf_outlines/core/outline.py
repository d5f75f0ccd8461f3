"""
Outline tree: items, the outlines root, and write-through structural edits.

Every item is a thin handle onto a backing record in an ObjectStorePort.
Navigation links (parent / prev / next / first / last) are kept as record
references in a table owned by the OutlineRoot, so an item never owns its
neighbours and erased items can be detected instead of dereferenced.

Every mutation writes the store first and updates the in-memory links only
once the store writes have succeeded.
"""
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional, Tuple

from pdf_outlines.core.exceptions import StaleReferenceError, ValidationError
from pdf_outlines.core.models import outline as fields
from pdf_outlines.core.models.outline import BLACK, Destination, OutlineFormat, TextColor

if TYPE_CHECKING:
    from pdf_outlines.core.ports.store import ObjectStorePort

logger = logging.getLogger(__name__)


@dataclass
class _Links:
    """In-memory navigation state of one item, as record references."""
    parent: Optional[int] = None
    prev: Optional[int] = None
    next: Optional[int] = None
    first: Optional[int] = None
    last: Optional[int] = None
    descendants: int = 0
    is_open: bool = True


def _check_title(title: Any) -> str:
    if not isinstance(title, str):
        raise ValidationError(f"Outline title must be a string, got {type(title).__name__}")
    return title


def _check_destination(destination: Any) -> Optional[Destination]:
    if destination is not None and not isinstance(destination, Destination):
        raise ValidationError(f"Expected Destination, got {type(destination).__name__}")
    return destination


class OutlineItem:
    """
    An entry in the document outline.

    Items are created through create_child / create_next on an existing
    item (or create_root on the OutlineRoot), never directly.
    """

    def __init__(self, root: "OutlineRoot", ref: int):
        self._root = root
        self._ref = ref

    def __repr__(self) -> str:
        state = "" if self.is_alive else " erased"
        return f"<{type(self).__name__} ref={self._ref}{state}>"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def _store(self) -> "ObjectStorePort":
        return self._root._store

    def _state(self) -> _Links:
        links = self._root._links.get(self._ref)
        if links is None or self._root._items.get(self._ref) is not self:
            raise StaleReferenceError(f"Outline item {self._ref} has been erased")
        return links

    def _item(self, ref: Optional[int]) -> Optional["OutlineItem"]:
        if ref is None:
            return None
        return self._root._items[ref]

    def _put(self, ref: int, key: str, value: Any) -> None:
        """Write a field, removing it when value is None."""
        if value is None:
            self._store.delete_field(ref, key)
        else:
            self._store.set_field(ref, key, value)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def ref(self) -> int:
        """Reference of the backing record."""
        return self._ref

    @property
    def is_alive(self) -> bool:
        return self._root._items.get(self._ref) is self

    @property
    def parent(self) -> Optional["OutlineItem"]:
        """Parent item, or None for the outlines root."""
        return self._item(self._state().parent)

    @property
    def prev(self) -> Optional["OutlineItem"]:
        """Previous sibling, or None if this is the first on its level."""
        return self._item(self._state().prev)

    @property
    def next(self) -> Optional["OutlineItem"]:
        """Next sibling, or None if this is the last on its level."""
        return self._item(self._state().next)

    @property
    def first(self) -> Optional["OutlineItem"]:
        """First child, or None if childless."""
        return self._item(self._state().first)

    @property
    def last(self) -> Optional["OutlineItem"]:
        """Last child, or None if childless."""
        return self._item(self._state().last)

    @property
    def depth(self) -> int:
        """Number of ancestors below the outlines root (top level items are 1)."""
        depth = 0
        links = self._state()
        while links.parent is not None:
            depth += 1
            links = self._root._links[links.parent]
        return depth

    def children(self) -> Iterator["OutlineItem"]:
        """Iterate direct children in order."""
        ref = self._state().first
        while ref is not None:
            yield self._root._items[ref]
            ref = self._root._links[ref].next

    def walk(self) -> Iterator[Tuple[int, "OutlineItem"]]:
        """Iterate all descendants depth-first, pre-order, as (level, item).

        Level is relative to this item: direct children are level 1.
        """
        stack = [(1, ref) for ref in reversed([c._ref for c in self.children()])]
        while stack:
            level, ref = stack.pop()
            yield level, self._root._items[ref]
            links = self._root._links[ref]
            child_refs = []
            child = links.first
            while child is not None:
                child_refs.append(child)
                child = self._root._links[child].next
            stack.extend((level + 1, c) for c in reversed(child_refs))

    # ------------------------------------------------------------------
    # Attributes (read through to the backing record)
    # ------------------------------------------------------------------

    @property
    def title(self) -> Optional[str]:
        self._state()
        return self._store.get_field(self._ref, fields.TITLE)

    @title.setter
    def title(self, value: str) -> None:
        self._state()
        self._store.set_field(self._ref, fields.TITLE, _check_title(value))

    @property
    def destination(self) -> Optional[Destination]:
        """Navigation target, or None when the item has none."""
        self._state()
        value = self._store.get_field(self._ref, fields.DEST)
        if value is None:
            return None
        return Destination.from_record(value, ref=self._ref)

    @destination.setter
    def destination(self, value: Optional[Destination]) -> None:
        self._state()
        _check_destination(value)
        self._put(self._ref, fields.DEST, value.to_record() if value else None)

    @property
    def text_format(self) -> OutlineFormat:
        self._state()
        return OutlineFormat.coerce(self._store.get_field(self._ref, fields.FORMAT, 0))

    @text_format.setter
    def text_format(self, value: OutlineFormat) -> None:
        self._state()
        value = OutlineFormat.coerce(value)
        # Default is the absence of the field
        self._put(self._ref, fields.FORMAT, int(value) or None)

    @property
    def text_color(self) -> TextColor:
        self._state()
        value = self._store.get_field(self._ref, fields.COLOR)
        if value is None:
            return BLACK
        return TextColor.from_record(value, ref=self._ref)

    @text_color.setter
    def text_color(self, value: TextColor) -> None:
        self._state()
        if not isinstance(value, TextColor):
            raise ValidationError(f"Expected TextColor, got {type(value).__name__}")
        self._put(self._ref, fields.COLOR, None if value == BLACK else value.to_record())

    def set_text_color(self, red: float, green: float, blue: float) -> None:
        self.text_color = TextColor(red, green, blue)

    @property
    def text_color_red(self) -> float:
        return self.text_color.red

    @property
    def text_color_green(self) -> float:
        return self.text_color.green

    @property
    def text_color_blue(self) -> float:
        return self.text_color.blue

    @property
    def is_open(self) -> bool:
        """Whether the item is shown expanded."""
        return self._state().is_open

    @is_open.setter
    def is_open(self, value: bool) -> None:
        links = self._state()
        if links.parent is None and not value:
            raise ValidationError("The outlines root cannot be collapsed")
        self._write_count(self._ref, links.descendants, bool(value))
        links.is_open = bool(value)

    @property
    def count(self) -> int:
        """Descendant count, negative when the item is collapsed."""
        links = self._state()
        return links.descendants if links.is_open else -links.descendants

    def _write_count(self, ref: int, descendants: int, is_open: bool) -> None:
        value = descendants if is_open else -descendants
        self._put(ref, fields.COUNT, value or None)

    def _store_counts(self, ref: Optional[int], delta: int) -> None:
        """Write the Count of ref and all its ancestors as if delta were applied."""
        while ref is not None:
            links = self._root._links[ref]
            self._write_count(ref, links.descendants + delta, links.is_open)
            ref = links.parent

    def _apply_counts(self, ref: Optional[int], delta: int) -> None:
        """Add delta to the in-memory descendant count of ref and its ancestors."""
        while ref is not None:
            links = self._root._links[ref]
            links.descendants += delta
            ref = links.parent

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------

    def create_child(
        self, title: str, destination: Optional[Destination] = None
    ) -> "OutlineItem":
        """Append a new item as the last child of this item.

        Args:
            title: Title of the new item
            destination: Optional navigation target

        Returns:
            The new item
        """
        links = self._state()
        record: Dict[str, Any] = {
            fields.TITLE: _check_title(title),
            fields.PARENT: self._ref,
        }
        if _check_destination(destination) is not None:
            record[fields.DEST] = destination.to_record()
        if links.last is not None:
            record[fields.PREV] = links.last

        ref = self._store.create_record(record)
        if links.last is not None:
            self._store.set_field(links.last, fields.NEXT, ref)
        else:
            self._store.set_field(self._ref, fields.FIRST, ref)
        self._store.set_field(self._ref, fields.LAST, ref)
        self._store_counts(self._ref, 1)

        item = self._root._register(ref, _Links(parent=self._ref, prev=links.last))
        if links.last is not None:
            self._root._links[links.last].next = ref
        else:
            links.first = ref
        links.last = ref
        self._apply_counts(self._ref, 1)

        logger.debug(f"Created outline item {ref} as last child of {self._ref}")
        return item

    def create_next(
        self, title: str, destination: Optional[Destination] = None
    ) -> "OutlineItem":
        """Insert a new item directly after this one on the same level.

        Args:
            title: Title of the new item
            destination: Optional navigation target

        Returns:
            The new item
        """
        links = self._state()
        if links.parent is None:
            raise ValidationError("The outlines root cannot have siblings")

        parent_ref = links.parent
        old_next = links.next
        record: Dict[str, Any] = {
            fields.TITLE: _check_title(title),
            fields.PARENT: parent_ref,
            fields.PREV: self._ref,
        }
        if _check_destination(destination) is not None:
            record[fields.DEST] = destination.to_record()
        if old_next is not None:
            record[fields.NEXT] = old_next

        ref = self._store.create_record(record)
        self._store.set_field(self._ref, fields.NEXT, ref)
        if old_next is not None:
            self._store.set_field(old_next, fields.PREV, ref)
        else:
            self._store.set_field(parent_ref, fields.LAST, ref)
        self._store_counts(parent_ref, 1)

        item = self._root._register(
            ref, _Links(parent=parent_ref, prev=self._ref, next=old_next)
        )
        links.next = ref
        if old_next is not None:
            self._root._links[old_next].prev = ref
        else:
            self._root._links[parent_ref].last = ref
        self._apply_counts(parent_ref, 1)

        logger.debug(f"Created outline item {ref} after {self._ref}")
        return item

    def erase(self) -> None:
        """Delete this item and all its descendants from the tree and the store.

        Every handle to an erased item becomes stale afterwards. If a store
        write fails the error propagates and the in-memory tree is left as it
        was before the call.
        """
        links = self._state()

        # Pre-order collection; reversed it erases children before parents
        subtree = []
        stack = [links.first] if links.first is not None else []
        while stack:
            ref = stack.pop()
            subtree.append(ref)
            child_links = self._root._links[ref]
            if child_links.next is not None:
                stack.append(child_links.next)
            if child_links.first is not None:
                stack.append(child_links.first)

        removed = links.descendants
        for ref in reversed(subtree):
            self._store.delete_record(ref)

        if links.parent is None:
            # The outlines root: no siblings to relink
            self._store.delete_record(self._ref)
            self._root._run_erase_hooks()
            for ref in subtree:
                self._root._unregister(ref)
            self._root._unregister(self._ref)
            logger.debug(f"Erased outlines root {self._ref} and {removed} items")
            return

        if links.prev is not None:
            self._put(links.prev, fields.NEXT, links.next)
        else:
            self._put(links.parent, fields.FIRST, links.next)
        if links.next is not None:
            self._put(links.next, fields.PREV, links.prev)
        else:
            self._put(links.parent, fields.LAST, links.prev)
        self._store.delete_record(self._ref)
        self._store_counts(links.parent, -(removed + 1))

        parent_links = self._root._links[links.parent]
        if links.prev is not None:
            self._root._links[links.prev].next = links.next
        else:
            parent_links.first = links.next
        if links.next is not None:
            self._root._links[links.next].prev = links.prev
        else:
            parent_links.last = links.prev
        self._apply_counts(links.parent, -(removed + 1))
        for ref in subtree:
            self._root._unregister(ref)
        self._root._unregister(self._ref)

        logger.debug(f"Erased outline item {self._ref} and {removed} descendants")


class OutlineRoot(OutlineItem):
    """
    The document's outlines dictionary: a parentless item without siblings.

    Do not construct it directly; use OutlineRoot.create / OutlineRoot.load
    or OutlineDocument.get_outlines().
    """

    def __init__(self, store: "ObjectStorePort", ref: int):
        self._store_ref = store
        self._items: Dict[int, OutlineItem] = {}
        self._links: Dict[int, _Links] = {}
        self._erase_hooks: List[Callable[[], None]] = []
        super().__init__(self, ref)
        self._items[ref] = self
        self._links[ref] = _Links()

    @property
    def _store(self) -> "ObjectStorePort":
        return self._store_ref

    @property
    def store(self) -> "ObjectStorePort":
        return self._store_ref

    @classmethod
    def create(cls, store: "ObjectStorePort") -> "OutlineRoot":
        """Allocate a fresh, empty outlines record."""
        ref = store.create_record({fields.TYPE: fields.OUTLINES_TYPE})
        logger.debug(f"Created outlines root {ref}")
        return cls(store, ref)

    @classmethod
    def load(
        cls,
        store: "ObjectStorePort",
        ref: int,
        max_depth: Optional[int] = None,
        max_items: Optional[int] = None,
    ) -> "OutlineRoot":
        """Attach to an existing outlines record and rebuild its tree.

        Args:
            store: Store holding the records
            ref: Reference of the outlines record
            max_depth: Nesting bound (defaults to settings)
            max_items: Item count bound (defaults to settings)

        Returns:
            Root with the full tree materialized

        Raises:
            StructuralIntegrityError: Stored relations are inconsistent
            MalformedRecordError: A record lacks a title or holds bad values
        """
        from pdf_outlines.core.loader import OutlineLoader

        root = cls(store, ref)
        OutlineLoader(store, max_depth=max_depth, max_items=max_items).load(root)
        return root

    @property
    def title(self) -> Optional[str]:
        """The outlines root carries no title."""
        self._state()
        return None

    @title.setter
    def title(self, value: str) -> None:
        raise ValidationError("The outlines root has no title")

    def on_erase(self, callback: Callable[[], None]) -> None:
        """Register a callback run once the root record has been deleted.

        Callbacks run before the in-memory tree is released, so a failing
        callback leaves the handles alive.
        """
        self._erase_hooks.append(callback)

    def _run_erase_hooks(self) -> None:
        for callback in self._erase_hooks:
            callback()

    def create_root(self, title: str) -> OutlineItem:
        """Create a top level item without destination."""
        return self.create_child(title)

    def __len__(self) -> int:
        """Number of items below the root."""
        return self._state().descendants

    def __iter__(self) -> Iterator[OutlineItem]:
        return (item for _, item in self.walk())

    def _register(self, ref: int, links: _Links) -> OutlineItem:
        item = OutlineItem(self, ref)
        self._items[ref] = item
        self._links[ref] = links
        return item

    def _unregister(self, ref: int) -> None:
        self._items.pop(ref, None)
        self._links.pop(ref, None)
