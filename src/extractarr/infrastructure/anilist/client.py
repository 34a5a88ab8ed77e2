"""AniList GraphQL client - artwork lookup for anime details."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from extractarr.domain.ports.http import HttpCapability

log = structlog.get_logger(__name__)

ANILIST_URL = "https://graphql.anilist.co"

_MEDIA_QUERY = """
query ($search: String) {
  Media(search: $search, type: ANIME) {
    id
    coverImage {
      extraLarge
      large
    }
    bannerImage
  }
}
"""


@dataclass(frozen=True)
class AniListMedia:
    id: int
    cover_image: str | None = None
    banner_image: str | None = None


def _parse_media(data: Any) -> AniListMedia | None:
    if not isinstance(data, dict) or data.get("errors"):
        return None
    media = (data.get("data") or {}).get("Media")
    if not isinstance(media, dict) or media.get("id") is None:
        return None
    cover = media.get("coverImage") or {}
    return AniListMedia(
        id=int(media["id"]),
        cover_image=cover.get("extraLarge") or cover.get("large") or None,
        banner_image=media.get("bannerImage") or None,
    )


class AniListClient:
    """Looks up one anime by title. Failures are logged and yield None."""

    def __init__(self, http: HttpCapability, *, url: str = ANILIST_URL) -> None:
        self._http = http
        self._url = url

    async def search_media(self, title: str) -> AniListMedia | None:
        title = title.strip()
        if not title:
            return None

        resp = await self._http.post(
            self._url,
            json={"query": _MEDIA_QUERY, "variables": {"search": title}},
            headers={"Accept": "application/json"},
        )
        if not resp.ok:
            log.warning(
                "anilist_http_error",
                status=resp.status,
                error=resp.error,
                title=title,
            )
            return None
        try:
            data = resp.json()
        except ValueError:
            log.warning("anilist_invalid_json", title=title)
            return None

        media = _parse_media(data)
        if media is None:
            log.debug("anilist_no_match", title=title)
        else:
            log.debug("anilist_match", title=title, anilist_id=media.id)
        return media
