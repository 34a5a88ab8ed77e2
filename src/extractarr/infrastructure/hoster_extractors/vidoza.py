"""Vidoza extractor - the embed page carries the file URL directly."""

from __future__ import annotations

import re

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.entities.media import StreamSource
from extractarr.infrastructure.common.patterns import extract_attribute, first_group

from .base import BaseStreamExtractor, browser_headers

# Legacy player config: sourcesCode: [{ src: "https://...mp4", ... }]
_SOURCES_CODE_RE = re.compile(
    r"sourcesCode:\s*\[.*?\{.*?src:\s*['\"]([^'\"]+)['\"]", re.DOTALL
)


def _extract_video_url(html: str) -> str | None:
    """``<video src>``, then the first ``<source src>``, then ``sourcesCode``."""
    return (
        extract_attribute(html, "video", "src")
        or extract_attribute(html, "source", "src")
        or first_group(_SOURCES_CODE_RE, html)
    )


class VidozaExtractor(BaseStreamExtractor):
    key = HosterKey.VIDOZA

    async def _extract(self, url: str) -> StreamSource | None:
        resp = await self._fetch(url, headers=browser_headers())
        video_url = _extract_video_url(resp.body)
        if not video_url:
            return None
        return self._source(video_url)
