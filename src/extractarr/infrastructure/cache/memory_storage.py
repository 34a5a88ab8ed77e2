"""In-process storage backend (default for tests and one-shot CLI runs)."""

from __future__ import annotations

from typing import Any


class MemoryStorage:
    """Dict-backed ``StoragePort``. Values are kept by reference."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    async def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def __len__(self) -> int:
        return len(self._data)
