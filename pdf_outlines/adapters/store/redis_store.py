"""Redis implementation of ObjectStorePort.

Each record is a Redis hash whose field values are JSON encoded.
A set tracks live references so empty records still exist.
"""
import json
from typing import Any, Dict, Optional

import redis

from pdf_outlines.config.settings import get_settings
from pdf_outlines.core.exceptions import StorageError
from pdf_outlines.core.ports.store import ObjectStorePort


class RedisObjectStore(ObjectStorePort):
    """Redis implementation of ObjectStorePort.

    Args:
        redis_client: Configured redis.Redis instance
        key_prefix: Prefix for all keys (default: settings.redis_prefix)
    """

    def __init__(self, redis_client, key_prefix: Optional[str] = None):
        self._redis = redis_client
        self._prefix = key_prefix if key_prefix is not None else get_settings().redis_prefix

    def _key(self, ref: int) -> str:
        """Build Redis key for a record."""
        return f"{self._prefix}obj:{ref}"

    @property
    def _refs_key(self) -> str:
        return f"{self._prefix}refs"

    @property
    def _counter_key(self) -> str:
        return f"{self._prefix}next_ref"

    def _require(self, ref: int) -> None:
        if not self.has_record(ref):
            raise StorageError(f"Record {ref!r} does not exist")

    def create_record(self, fields: Optional[Dict[str, Any]] = None) -> int:
        """Allocate a reference and write the initial fields."""
        try:
            ref = int(self._redis.incr(self._counter_key))
            if fields:
                mapping = {key: json.dumps(value) for key, value in fields.items()}
                self._redis.hset(self._key(ref), mapping=mapping)
            self._redis.sadd(self._refs_key, ref)
        except redis.RedisError as e:
            raise StorageError(f"Failed to create record: {e}") from e
        return ref

    def delete_record(self, ref: int) -> None:
        """Delete the record hash and forget its reference."""
        self._require(ref)
        try:
            self._redis.delete(self._key(ref))
            self._redis.srem(self._refs_key, ref)
        except redis.RedisError as e:
            raise StorageError(f"Failed to delete record {ref}: {e}") from e

    def has_record(self, ref: int) -> bool:
        try:
            return bool(self._redis.sismember(self._refs_key, ref))
        except redis.RedisError as e:
            raise StorageError(f"Failed to look up record {ref}: {e}") from e

    def get_field(self, ref: int, key: str, default: Any = None) -> Any:
        self._require(ref)
        try:
            raw = self._redis.hget(self._key(ref), key)
        except redis.RedisError as e:
            raise StorageError(f"Failed to read {key} of record {ref}: {e}") from e
        if raw is None:
            return default
        return json.loads(raw)

    def set_field(self, ref: int, key: str, value: Any) -> None:
        self._require(ref)
        try:
            self._redis.hset(self._key(ref), key, json.dumps(value))
        except redis.RedisError as e:
            raise StorageError(f"Failed to write {key} of record {ref}: {e}") from e

    def delete_field(self, ref: int, key: str) -> None:
        self._require(ref)
        try:
            self._redis.hdel(self._key(ref), key)
        except redis.RedisError as e:
            raise StorageError(f"Failed to delete {key} of record {ref}: {e}") from e
