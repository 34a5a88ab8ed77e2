"""Port implemented by every catalog-site adapter."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from extractarr.domain.entities.media import (
    AnimeDetails,
    AnimeSummary,
    Episode,
    PaginatedResult,
    StreamSource,
)


@runtime_checkable
class MediaProviderPort(Protocol):
    """Site adapter behind the provider facade.

    ``search`` reports failures through the envelope's ``error`` field.
    The other methods raise ``ExtractarrError`` subclasses and leave the
    recovery to the facade.
    """

    @property
    def name(self) -> str: ...

    async def search(self, query: str, page: int = 1) -> PaginatedResult[AnimeSummary]: ...

    async def get_popular(self, page: int = 1) -> PaginatedResult[AnimeSummary]: ...

    async def get_latest(self, page: int = 1) -> PaginatedResult[AnimeSummary]: ...

    async def get_episodes(self, anime_id: str, page: int = 1) -> PaginatedResult[Episode]: ...

    async def get_streams(self, anime_id: str, episode_id: str) -> list[StreamSource]: ...

    async def get_anime_details(self, anime_id: str) -> AnimeDetails: ...
