"""
Conversion between outline trees and PyMuPDF table-of-contents lists.

Infrastructure: used by the PyMuPDF adapter. A detailed toc entry is
[level, title, page, dest] where page is 1-indexed (-1 for no target)
and dest is a dict carrying kind, to, zoom, color, bold, italic, collapse.
"""
import logging
from typing import Any, Dict, List, Optional

import fitz

from pdf_outlines.core.exceptions import ValidationError
from pdf_outlines.core.models.outline import BLACK, Destination, OutlineFormat, TextColor
from pdf_outlines.core.outline import OutlineItem, OutlineRoot
from pdf_outlines.core.ports.store import ObjectStorePort

logger = logging.getLogger(__name__)


def _dest_from_entry(page: int, extra: Dict[str, Any]) -> Optional[Destination]:
    """Destination for a toc entry, or None if it has no in-document target."""
    if page < 1 or extra.get("kind", fitz.LINK_GOTO) != fitz.LINK_GOTO:
        return None
    left = top = None
    to = extra.get("to")
    if to is not None:
        left, top = float(to[0]), float(to[1])
    zoom = extra.get("zoom")
    return Destination(page=page, left=left, top=top, zoom=float(zoom) if zoom else None)


def _apply_style(item: OutlineItem, extra: Dict[str, Any]) -> None:
    text_format = OutlineFormat.from_flags(
        bold=bool(extra.get("bold")), italic=bool(extra.get("italic"))
    )
    if text_format != OutlineFormat.DEFAULT:
        item.text_format = text_format
    color = extra.get("color")
    if color is not None and len(color) == 3:
        item.text_color = TextColor(*color)
    if extra.get("collapse"):
        item.is_open = False


def toc_to_tree(store: ObjectStorePort, toc: List[list]) -> OutlineRoot:
    """
    Build a new outline tree from a toc list.

    Args:
        store: Store that receives the backing records
        toc: Simple or detailed toc entries

    Returns:
        Root of the new tree

    Raises:
        ValidationError: If a level is not an int or levels skip (a level
                         may grow by at most one)
    """
    root = OutlineRoot.create(store)
    # ancestors[i] is the parent for items at level i + 1
    ancestors: List[OutlineItem] = [root]

    for index, entry in enumerate(toc):
        if len(entry) < 3:
            raise ValidationError(f"Toc entry {index} is incomplete: {entry!r}")
        level, title, page = entry[0], entry[1], entry[2]
        extra = entry[3] if len(entry) > 3 and isinstance(entry[3], dict) else {}
        if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= len(ancestors):
            raise ValidationError(f"Toc entry {index} has invalid level {level!r}")

        del ancestors[level:]
        item = ancestors[-1].create_child(title, _dest_from_entry(page, extra))
        _apply_style(item, extra)
        ancestors.append(item)

    logger.debug(f"Built outline {root.ref} from {len(toc)} toc entries")
    return root


def tree_to_toc(root: OutlineItem) -> List[list]:
    """
    Flatten a tree into a detailed toc list for Document.set_toc.

    Args:
        root: Outlines root (or any item, whose descendants are exported)

    Returns:
        List of [level, title, page, dest] entries in pre-order
    """
    toc = []
    for level, item in root.walk():
        destination = item.destination
        text_format = item.text_format
        dest: Dict[str, Any] = {
            "kind": fitz.LINK_GOTO if destination else fitz.LINK_NONE,
            "bold": text_format.bold,
            "italic": text_format.italic,
            "collapse": not item.is_open,
        }
        color = item.text_color
        if color != BLACK:
            dest["color"] = (color.red, color.green, color.blue)
        if destination is not None:
            if destination.left is not None and destination.top is not None:
                dest["to"] = fitz.Point(destination.left, destination.top)
            if destination.zoom is not None:
                dest["zoom"] = destination.zoom
        toc.append([level, item.title, destination.page if destination else -1, dest])
    return toc
