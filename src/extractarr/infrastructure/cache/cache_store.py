"""Bounded TTL+FIFO cache persisted as a single storage blob.

Eviction happens on two independent axes:

- size: once ``max_size`` entries are held, the oldest-inserted key is
  dropped before a new key is inserted. Reads never reorder entries.
- age: an entry older than ``max_age`` seconds is treated as missing and
  purged on the read that observes it.

The full entry list is written back to storage under ``cache:<namespace>``
after every mutation, so a new process picks up where the last one left
off. There is no locking; concurrent writers of the same key converge
because cached values are recomputations of the same upstream fetch.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import Any, Callable

import structlog

from extractarr.domain.entities.media import CacheEntry
from extractarr.domain.ports.storage import StoragePort

log = structlog.get_logger(__name__)

DEFAULT_MAX_SIZE = 20
DEFAULT_MAX_AGE = 24 * 60 * 60


class CacheStore:
    def __init__(
        self,
        storage: StoragePort,
        namespace: str,
        *,
        max_size: int = DEFAULT_MAX_SIZE,
        max_age: float = DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be > 0")
        if max_age <= 0:
            raise ValueError("max_age must be > 0")
        self._storage = storage
        self.namespace = namespace
        self.max_size = max_size
        self.max_age = max_age
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._loaded = False

    @property
    def storage_key(self) -> str:
        return f"cache:{self.namespace}"

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.inserted_at > self.max_age

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        raw = await self._storage.get(self.storage_key, [])
        now = self._clock()
        skipped = 0
        for item in raw or []:
            entry = CacheEntry(
                key=item["key"], value=item["value"], inserted_at=item["inserted_at"]
            )
            if self._is_expired(entry, now):
                skipped += 1
                continue
            self._entries[entry.key] = entry
        # Persisted blobs from a larger max_size are trimmed oldest-first.
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
        if raw:
            log.debug(
                "cache_loaded",
                namespace=self.namespace,
                entries=len(self._entries),
                expired=skipped,
            )

    async def _persist(self) -> None:
        await self._storage.set(
            self.storage_key,
            [
                {"key": e.key, "value": e.value, "inserted_at": e.inserted_at}
                for e in self._entries.values()
            ],
        )

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        await self._ensure_loaded()
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry, self._clock()):
            del self._entries[key]
            log.debug("cache_expired", namespace=self.namespace, key=key)
            await self._persist()
            return None
        return entry.value

    async def set(self, key: str, value: Any) -> None:
        """Insert or replace ``key``; replacing makes it the newest entry."""
        await self._ensure_loaded()
        now = self._clock()
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_size:
            oldest, _ = self._entries.popitem(last=False)
            log.debug("cache_evict", namespace=self.namespace, key=oldest)
        self._entries[key] = CacheEntry(key=key, value=value, inserted_at=now)
        await self._persist()

    async def clear(self) -> None:
        self._entries.clear()
        self._loaded = True
        await self._storage.delete(self.storage_key)
