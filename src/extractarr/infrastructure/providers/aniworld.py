"""aniworld.to catalog adapter.

Search goes through the site's JSON endpoint; everything else is scraped
from HTML with the patterns in ``aniworld_parsers``. Detail and episode
lookups share one fetch of the anime page through a short-lived memo.
"""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Callable
from urllib.parse import quote

from extractarr.domain.entities.http import HttpResponse
from extractarr.domain.entities.media import (
    AnimeDetails,
    AnimeSummary,
    Episode,
    PaginatedResult,
    StreamSource,
)
from extractarr.domain.exceptions import ExtractarrError
from extractarr.domain.ports.http import HttpCapability
from extractarr.infrastructure.anilist import AniListClient

from . import aniworld_parsers as parsers
from .base import ProviderAdapterBase
from .policies import DefaultPolicy, mark_default

DEFAULT_BASE_URL = "https://aniworld.to"
DEFAULT_PAGE_SIZE = 24
MAIN_PAGE_TTL = 30.0

POPULAR_PATH = "/beliebte-animes"
LATEST_PATH = "/neu"
SEARCH_PATH = "/ajax/seriesSearch"


def paginate(
    items: list[AnimeSummary], page: int, page_size: int
) -> PaginatedResult[AnimeSummary]:
    """Client-side page slice; pages are 1-based."""
    page = max(page, 1)
    start = (page - 1) * page_size
    return PaginatedResult(
        results=items[start : start + page_size],
        has_next_page=start + page_size < len(items),
        current_page=page,
        total_results=len(items),
    )


class AniworldProvider(ProviderAdapterBase):
    name = "aniworld"
    default_base_url = DEFAULT_BASE_URL

    def __init__(
        self,
        http: HttpCapability,
        *,
        base_url: str | None = None,
        default_policy: DefaultPolicy = "first",
        page_size: int = DEFAULT_PAGE_SIZE,
        anilist: AniListClient | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(http, base_url=base_url, default_policy=default_policy)
        if page_size <= 0:
            raise ValueError("page_size must be > 0")
        self.page_size = page_size
        self._anilist = anilist
        self._clock = clock
        self._main_pages: dict[str, tuple[float, HttpResponse]] = {}

    # -- search / listings ------------------------------------------------

    async def search(self, query: str, page: int = 1) -> PaginatedResult[AnimeSummary]:
        if not query or not query.strip():
            return PaginatedResult.empty(page)

        url = f"{self.base_url}{SEARCH_PATH}?keyword={quote(query.strip())}"
        try:
            response = await self._fetch(url, headers={"Accept": "application/json"})
            data = self._parse_json(response, "Failed to parse search response as JSON")
        except ExtractarrError as exc:
            self._log.warning("aniworld_search_failed", query=query, error=str(exc))
            return PaginatedResult.empty(page, error=str(exc))

        if not isinstance(data, list):
            return PaginatedResult.empty(page)

        results = [
            summary
            for summary in (parsers.parse_search_item(item, self.base_url) for item in data)
            if summary is not None
        ]
        self._log.debug("aniworld_search", query=query, results=len(results))
        return PaginatedResult(
            results=results,
            has_next_page=False,
            current_page=page,
            total_results=len(results),
        )

    async def _listing(self, path: str, page: int) -> PaginatedResult[AnimeSummary]:
        response = await self._fetch(self._url(path))
        cards = parsers.scan_catalog_cards(response.body, self.base_url)
        self._log.debug("aniworld_listing", path=path, cards=len(cards), page=page)
        return paginate(cards, page, self.page_size)

    async def get_popular(self, page: int = 1) -> PaginatedResult[AnimeSummary]:
        return await self._listing(POPULAR_PATH, page)

    async def get_latest(self, page: int = 1) -> PaginatedResult[AnimeSummary]:
        return await self._listing(LATEST_PATH, page)

    # -- anime page -------------------------------------------------------

    async def _main_page(self, anime_id: str) -> HttpResponse:
        now = self._clock()
        expired = [k for k, (at, _) in self._main_pages.items() if now - at >= MAIN_PAGE_TTL]
        for key in expired:
            del self._main_pages[key]

        cached = self._main_pages.get(anime_id)
        if cached is not None:
            self._log.debug("aniworld_main_page_memo_hit", anime_id=anime_id)
            return cached[1]

        response = await self._fetch(self._url(parsers.anime_path(anime_id)))
        self._main_pages[anime_id] = (now, response)
        return response

    async def get_episodes(self, anime_id: str, page: int = 1) -> PaginatedResult[Episode]:
        response = await self._main_page(anime_id)
        episodes = parsers.scan_episodes(response.body, anime_id)
        self._log.debug("aniworld_episodes", anime_id=anime_id, episodes=len(episodes))
        return PaginatedResult(
            results=episodes,
            has_next_page=False,
            current_page=page,
            total_results=len(episodes),
        )

    async def get_anime_details(self, anime_id: str) -> AnimeDetails:
        response = await self._main_page(anime_id)
        details = parsers.parse_anime_details(response.body, anime_id, self.base_url)
        return await self._enrich(details, response.body)

    async def _enrich(self, details: AnimeDetails, html: str) -> AnimeDetails:
        if self._anilist is None:
            return details
        title = parsers.extract_anilist_search_title(html) or details.title
        if not title or title == "Unknown":
            return details
        media = await self._anilist.search_media(title)
        if media is None:
            return details
        return replace(
            details,
            cover=media.cover_image or details.cover,
            banner=media.banner_image or details.banner,
            anilist_id=media.id,
        )

    # -- streams ----------------------------------------------------------

    async def get_streams(self, anime_id: str, episode_id: str) -> list[StreamSource]:
        path = parsers.episode_path(anime_id, episode_id)
        response = await self._fetch(self._url(path))
        sources = parsers.scan_stream_sources(response.body, self.base_url)
        self._log.debug(
            "aniworld_streams",
            anime_id=anime_id,
            episode_id=episode_id,
            sources=len(sources),
        )
        return mark_default(sources, self.default_policy)
