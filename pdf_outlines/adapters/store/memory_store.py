"""In-memory implementation of ObjectStorePort.

Keeps records in a dict keyed by reference. Values are deep-copied on the way
in and out so callers cannot mutate stored state behind the store's back.
"""
import copy
from typing import Any, Dict, Iterator, Optional

from pdf_outlines.core.exceptions import StorageError
from pdf_outlines.core.ports.store import ObjectStorePort


class InMemoryObjectStore(ObjectStorePort):
    """Dict-backed record store.

    References are allocated from a monotonically increasing counter and
    never reused.
    """

    def __init__(self):
        self._records: Dict[int, Dict[str, Any]] = {}
        self._next_ref = 1

    def _record(self, ref: int) -> Dict[str, Any]:
        """Resolve a reference or fail."""
        try:
            return self._records[ref]
        except (KeyError, TypeError):
            raise StorageError(f"Record {ref!r} does not exist")

    def create_record(self, fields: Optional[Dict[str, Any]] = None) -> int:
        ref = self._next_ref
        self._next_ref += 1
        self._records[ref] = copy.deepcopy(dict(fields or {}))
        return ref

    def delete_record(self, ref: int) -> None:
        self._record(ref)
        del self._records[ref]

    def has_record(self, ref: int) -> bool:
        try:
            return ref in self._records
        except TypeError:
            return False

    def get_field(self, ref: int, key: str, default: Any = None) -> Any:
        record = self._record(ref)
        if key not in record:
            return default
        return copy.deepcopy(record[key])

    def set_field(self, ref: int, key: str, value: Any) -> None:
        self._record(ref)[key] = copy.deepcopy(value)

    def delete_field(self, ref: int, key: str) -> None:
        self._record(ref).pop(key, None)

    def get_record(self, ref: int) -> Dict[str, Any]:
        """Copy of all fields of a record."""
        return copy.deepcopy(self._record(ref))

    def __contains__(self, ref: int) -> bool:
        """Check if record exists."""
        return self.has_record(ref)

    def __len__(self) -> int:
        """Number of stored records."""
        return len(self._records)

    def __iter__(self) -> Iterator[int]:
        """Iterate stored references in allocation order."""
        return iter(sorted(self._records))
