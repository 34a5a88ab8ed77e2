"""Diskcache storage backend - SQLite-based persistence without daemon process."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import structlog
from diskcache import Cache as DiskCache

log = structlog.get_logger(__name__)


class DiskcacheStorage:
    """Async ``StoragePort`` over ``diskcache.Cache`` (sync-only library).

    - Disk I/O runs in ``asyncio.to_thread`` so the event loop never blocks.
    - A semaphore bounds parallel writers (SQLite lock contention).
    - The cache is opened lazily on first access; ``async with`` works too.
    - Entries never expire at this layer; age is tracked by ``CacheStore``.
    """

    def __init__(
        self,
        directory: str | Path = "./.cache/extractarr",
        max_concurrent: int = 10,
    ) -> None:
        self.directory = Path(directory)
        self._cache: DiskCache | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

    async def __aenter__(self) -> DiskcacheStorage:
        await self._open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def _open(self) -> DiskCache:
        if self._cache is None:
            self._cache = await asyncio.to_thread(DiskCache, str(self.directory))
            log.info("diskcache_opened", path=str(self.directory))
        return self._cache

    async def aclose(self) -> None:
        if self._cache is not None:
            await asyncio.to_thread(self._cache.close)
            self._cache = None
            log.info("diskcache_closed", directory=str(self.directory))

    async def get(self, key: str, default: Any = None) -> Any:
        cache = await self._open()
        async with self._semaphore:
            value = await asyncio.to_thread(cache.get, key, default)
        log.debug("storage_get", key=key, hit=value is not default)
        return value

    async def set(self, key: str, value: Any) -> None:
        cache = await self._open()
        async with self._semaphore:
            await asyncio.to_thread(cache.set, key, value)
        log.debug("storage_set", key=key)

    async def delete(self, key: str) -> bool:
        cache = await self._open()
        async with self._semaphore:
            deleted = await asyncio.to_thread(cache.delete, key)
        log.debug("storage_delete", key=key, deleted=deleted)
        return bool(deleted)
