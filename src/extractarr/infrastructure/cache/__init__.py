"""Cache infrastructure - storage backends and the TTL+FIFO cache store."""

from .cache_store import CacheStore
from .diskcache_storage import DiskcacheStorage
from .memory_storage import MemoryStorage
from .storage_factory import StorageBackend, create_storage

__all__ = [
    "CacheStore",
    "DiskcacheStorage",
    "MemoryStorage",
    "StorageBackend",
    "create_storage",
]
