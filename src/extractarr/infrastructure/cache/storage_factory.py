"""Storage factory - creates the backend selected in config."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog

from extractarr.domain.ports.storage import StoragePort

from .diskcache_storage import DiskcacheStorage
from .memory_storage import MemoryStorage

log = structlog.get_logger(__name__)

StorageBackend = Literal["memory", "diskcache"]


def create_storage(
    backend: StorageBackend = "memory",
    *,
    directory: str | Path = "./.cache/extractarr",
) -> StoragePort:
    """Create a storage backend.

    Raises:
        ValueError: If ``backend`` is unknown.
    """
    log.info("storage_factory_create", backend=backend, directory=str(directory))
    if backend == "memory":
        return MemoryStorage()
    if backend == "diskcache":
        return DiskcacheStorage(directory=directory)
    raise ValueError(
        f"Unknown storage backend: {backend!r}. Must be 'memory' or 'diskcache'."
    )
