"""LoadX extractor - HEAD for the id hash, then the player JSON API."""

from __future__ import annotations

from urllib.parse import urlsplit

import structlog

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.entities.media import StreamFormat, StreamSource
from extractarr.infrastructure.common.patterns import path_segments
from extractarr.infrastructure.http.response import raise_for_response

from .base import BaseStreamExtractor

log = structlog.get_logger(__name__)

PLAYER_API = "https://{host}/player/index.php?data={id_hash}&do=getVideo"


def _id_hash(url: str) -> str | None:
    """Second path segment (``/video/<hash>/...``), else the first."""
    segments = path_segments(url)
    if len(segments) >= 2:
        return segments[1]
    return segments[0] if segments else None


class LoadXExtractor(BaseStreamExtractor):
    key = HosterKey.LOADX

    async def _extract(self, url: str) -> StreamSource | None:
        head = await self._http.head(url)
        effective = head.url if head.ok and head.url else url
        id_hash = _id_hash(effective)
        host = urlsplit(effective).netloc
        if not id_hash or not host:
            return None

        resp = await self._http.post(
            PLAYER_API.format(host=host, id_hash=id_hash),
            headers={"X-Requested-With": "XMLHttpRequest"},
        )
        raise_for_response(resp, context=self.display_name)
        try:
            data = resp.json()
        except ValueError:
            log.warning("loadx_invalid_json", url=url)
            return None

        video_url = data.get("videoSource") if isinstance(data, dict) else None
        if not isinstance(video_url, str) or not video_url.strip():
            log.warning("loadx_no_video_source", url=url)
            return None
        return self._source(video_url.strip(), fmt=StreamFormat.M3U8, force_hls=True)
