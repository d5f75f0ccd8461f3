"""Object store adapters."""
from pdf_outlines.adapters.store.memory_store import InMemoryObjectStore
from pdf_outlines.adapters.store.redis_store import RedisObjectStore

__all__ = [
    "InMemoryObjectStore",
    "RedisObjectStore",
]
