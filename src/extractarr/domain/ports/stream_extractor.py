"""Port for per-hoster stream extraction strategies."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from extractarr.domain.entities.media import StreamSource


@runtime_checkable
class StreamExtractorPort(Protocol):
    """Turns a hoster page URL into a directly playable stream source."""

    @property
    def name(self) -> str:
        """Hoster key this extractor handles (e.g. 'voe', 'streamtape')."""
        ...

    async def extract(self, url: str) -> StreamSource | None:
        """Return the playable source, or None when no pattern matched."""
        ...
