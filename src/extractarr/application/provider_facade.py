"""Provider capability facade.

Wraps one catalog adapter with cache-through semantics and turns every
failure into a value: an error-tagged envelope, a placeholder details
record, an empty list or None. Nothing raised below this layer reaches
the caller.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog

from extractarr.domain.entities.media import (
    AnimeDetails,
    AnimeSummary,
    Episode,
    HosterInfo,
    PaginatedResult,
    StreamSource,
)
from extractarr.domain.exceptions import (
    ExtractarrError,
    ExtractionFailure,
    RedirectUnresolvedError,
    UnsupportedHosterError,
)
from extractarr.domain.ports.media_provider import MediaProviderPort
from extractarr.domain.ports.storage import StoragePort
from extractarr.infrastructure.cache.cache_store import CacheStore
from extractarr.infrastructure.hoster_extractors.redirect import RedirectResolver
from extractarr.infrastructure.hoster_extractors.registry import (
    HosterRegistry,
    supported_hosters,
)

log = structlog.get_logger(__name__)

T = TypeVar("T")

FAMILIES = ("search", "popular", "latest", "episodes", "streams", "details", "extract")


def cache_key(operation: str, *args: Any) -> str:
    """``"search:naruto:1"`` style key: operation plus positional args."""
    return ":".join([operation, *map(str, args)])


@dataclass(frozen=True)
class CacheFamilies:
    """One Cache Store per operation family."""

    search: CacheStore
    popular: CacheStore
    latest: CacheStore
    episodes: CacheStore
    streams: CacheStore
    details: CacheStore
    extract: CacheStore

    @classmethod
    def create(
        cls,
        storage: StoragePort,
        bounds: Mapping[str, tuple[int, float]] | None = None,
        *,
        prefix: str = "",
        clock: Callable[[], float] | None = None,
    ) -> CacheFamilies:
        """Build all stores on one storage; ``bounds`` maps family -> (size, age)."""
        stores: dict[str, CacheStore] = {}
        for family in FAMILIES:
            kwargs: dict[str, Any] = {}
            if bounds and family in bounds:
                kwargs["max_size"], kwargs["max_age"] = bounds[family]
            if clock is not None:
                kwargs["clock"] = clock
            stores[family] = CacheStore(storage, f"{prefix}{family}", **kwargs)
        return cls(**stores)


class ProviderFacade:
    """The surface the host application calls."""

    def __init__(
        self,
        adapter: MediaProviderPort,
        registry: HosterRegistry,
        redirect_resolver: RedirectResolver,
        caches: CacheFamilies,
        *,
        on_close: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self.adapter = adapter
        self.registry = registry
        self.redirect_resolver = redirect_resolver
        self.caches = caches
        self._on_close = on_close

    async def aclose(self) -> None:
        if self._on_close is not None:
            await self._on_close()
            self._on_close = None

    # -- helpers ------------------------------------------------------------

    async def _cached(
        self,
        store: CacheStore,
        key: str,
        fetch: Callable[[], Awaitable[T]],
        *,
        cacheable: Callable[[T], bool],
    ) -> T:
        hit = await store.get(key)
        if hit is not None:
            log.debug("facade_cache_hit", family=store.namespace, key=key)
            return hit
        value = await fetch()
        if cacheable(value):
            await store.set(key, value)
        return value

    @staticmethod
    def _log_failure(operation: str, exc: Exception, **context: Any) -> str:
        if isinstance(exc, ExtractarrError):
            log.warning(f"{operation}_failed", error=str(exc), **context)
        else:
            log.exception(f"{operation}_crashed", **context)
        return str(exc) or type(exc).__name__

    async def _paginated(
        self,
        operation: str,
        store: CacheStore,
        page: int,
        fetch: Callable[[], Awaitable[PaginatedResult[T]]],
        *args: Any,
    ) -> PaginatedResult[T]:
        key = cache_key(operation, *args, page)
        try:
            return await self._cached(store, key, fetch, cacheable=lambda r: r.ok)
        except Exception as exc:  # noqa: BLE001
            error = self._log_failure(operation, exc, key=key)
            return PaginatedResult.empty(page, error=error)

    # -- catalog --------------------------------------------------------------

    async def search(self, query: str, page: int = 1) -> PaginatedResult[AnimeSummary]:
        return await self._paginated(
            "search",
            self.caches.search,
            page,
            lambda: self.adapter.search(query, page),
            query,
        )

    async def get_popular(self, page: int = 1) -> PaginatedResult[AnimeSummary]:
        return await self._paginated(
            "popular", self.caches.popular, page, lambda: self.adapter.get_popular(page)
        )

    async def get_latest(self, page: int = 1) -> PaginatedResult[AnimeSummary]:
        return await self._paginated(
            "latest", self.caches.latest, page, lambda: self.adapter.get_latest(page)
        )

    async def get_episodes(self, anime_id: str, page: int = 1) -> PaginatedResult[Episode]:
        return await self._paginated(
            "episodes",
            self.caches.episodes,
            page,
            lambda: self.adapter.get_episodes(anime_id, page),
            anime_id,
        )

    async def get_streams(self, anime_id: str, episode_id: str) -> list[StreamSource]:
        key = cache_key("streams", anime_id, episode_id)
        try:
            return await self._cached(
                self.caches.streams,
                key,
                lambda: self.adapter.get_streams(anime_id, episode_id),
                cacheable=bool,
            )
        except Exception as exc:  # noqa: BLE001
            self._log_failure("streams", exc, key=key)
            return []

    async def get_anime_details(self, anime_id: str) -> AnimeDetails:
        key = cache_key("details", anime_id)
        try:
            return await self._cached(
                self.caches.details,
                key,
                lambda: self.adapter.get_anime_details(anime_id),
                cacheable=lambda d: d.error is None,
            )
        except Exception as exc:  # noqa: BLE001
            error = self._log_failure("details", exc, key=key)
            return AnimeDetails.failed(anime_id, error)

    # -- hosters --------------------------------------------------------------

    async def _extract(self, url: str) -> StreamSource:
        target = url
        if self.redirect_resolver.is_indirection(url):
            resolved = await self.redirect_resolver.resolve(url)
            if resolved is None:
                raise RedirectUnresolvedError(url)
            target = resolved

        key = self.registry.identify(target)
        if key is None:
            raise UnsupportedHosterError(target)

        source = await self.registry.extractor_for(key).extract(target)
        if source is None:
            raise ExtractionFailure(key.display_name, target)
        return source

    async def extract_stream(self, url: str) -> StreamSource | None:
        """Resolve a hoster or indirection URL to a playable source, or None."""
        key = cache_key("extract", url)
        try:
            return await self._cached(
                self.caches.extract,
                key,
                lambda: self._extract(url),
                cacheable=lambda s: s is not None,
            )
        except Exception as exc:  # noqa: BLE001
            self._log_failure("extract", exc, url=url)
            return None

    def get_hoster_info(self, url: str) -> HosterInfo:
        return self.registry.hoster_info(url)

    def is_supported(self, url: str) -> bool:
        return self.registry.is_supported(url)

    def get_supported_hosters(self) -> list[dict[str, str]]:
        return supported_hosters()
