"""Object store port interface.

Defines the contract for backing record persistence. Core code depends only
on this abstraction, not on specific implementations like Redis.

Records are keyed by integer references; field values are JSON-compatible
and reference fields hold the integer reference of another record.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ObjectStorePort(ABC):
    """Abstract interface for backing record persistence.

    Implementations: InMemoryObjectStore, RedisObjectStore
    """

    @abstractmethod
    def create_record(self, fields: Optional[Dict[str, Any]] = None) -> int:
        """Allocate a new record.

        Args:
            fields: Initial field values

        Returns:
            Reference of the new record
        """
        pass

    @abstractmethod
    def delete_record(self, ref: int) -> None:
        """Remove a record.

        Args:
            ref: Record reference

        Raises:
            StorageError: If the record does not exist or deletion fails
        """
        pass

    @abstractmethod
    def has_record(self, ref: int) -> bool:
        """Check whether a reference resolves to a record.

        Args:
            ref: Record reference

        Returns:
            True if the record exists
        """
        pass

    @abstractmethod
    def get_field(self, ref: int, key: str, default: Any = None) -> Any:
        """Read a field.

        Args:
            ref: Record reference
            key: Field name
            default: Value returned when the field is absent

        Returns:
            Field value or default

        Raises:
            StorageError: If the record does not exist
        """
        pass

    @abstractmethod
    def set_field(self, ref: int, key: str, value: Any) -> None:
        """Write a field.

        Args:
            ref: Record reference
            key: Field name
            value: JSON-compatible value

        Raises:
            StorageError: If the record does not exist
        """
        pass

    @abstractmethod
    def delete_field(self, ref: int, key: str) -> None:
        """Remove a field if present.

        Args:
            ref: Record reference
            key: Field name

        Raises:
            StorageError: If the record does not exist
        """
        pass
