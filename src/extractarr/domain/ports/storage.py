"""Port for key/value persistence (cache blobs, settings)."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StoragePort(Protocol):
    async def get(self, key: str, default: Any = None) -> Any: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def delete(self, key: str) -> bool: ...
