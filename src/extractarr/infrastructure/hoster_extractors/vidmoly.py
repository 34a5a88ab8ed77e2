"""Vidmoly extractor - JWPlayer ``sources`` literal, plain or packed.

Vidmoly answers 403 without a matching Referer, both on the embed page
and on the playlist itself.
"""

from __future__ import annotations

import re

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.entities.media import StreamSource
from extractarr.infrastructure.common.patterns import first_group

from ._packer import iter_unpacked_scripts
from .base import BaseStreamExtractor, browser_headers

VIDMOLY_REFERER = "https://vidmoly.to/"

_SOURCES_RE = re.compile(r'sources:\s*\[\{file:\s*"([^"]+)"\}\]')
_FILE_RE = re.compile(r"""file\s*:\s*["'](https?://[^"']+)["']""")


def _extract_sources_file(html: str) -> str | None:
    url = first_group(_SOURCES_RE, html)
    if url:
        return url
    for unpacked in iter_unpacked_scripts(html):
        normalized = unpacked.replace("\\'", "'").replace('\\"', '"')
        url = first_group(_FILE_RE, normalized)
        if url:
            return url
    return None


class VidmolyExtractor(BaseStreamExtractor):
    key = HosterKey.VIDMOLY

    async def _extract(self, url: str) -> StreamSource | None:
        resp = await self._fetch(url, headers=browser_headers(VIDMOLY_REFERER))
        video_url = _extract_sources_file(resp.body)
        if not video_url:
            return None
        return self._source(
            video_url,
            headers={"Referer": VIDMOLY_REFERER},
            requires_headers=True,
        )
