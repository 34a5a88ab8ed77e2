"""Luluvdo extractor - resolves the file code, then reads the embed config.

Only a mobile User-Agent gets the embed, and playback needs the same one.
"""

from __future__ import annotations

import re

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.entities.media import StreamSource
from extractarr.infrastructure.common.patterns import first_group, path_segments
from extractarr.infrastructure.http.constants import MOBILE_FIREFOX_USER_AGENT

from ._packer import iter_unpacked_scripts
from .base import BaseStreamExtractor

EMBED_URL = "https://luluvdo.com/dl?op=embed&file_code={file_code}"

_FILE_RE = re.compile(r'file:\s*"([^"]+)"')


def _file_code(url: str) -> str | None:
    """Last path segment of the (effective) page URL."""
    segments = path_segments(url)
    return segments[-1] if segments else None


def _extract_file(html: str) -> str | None:
    url = first_group(_FILE_RE, html)
    if url:
        return url
    for unpacked in iter_unpacked_scripts(html):
        url = first_group(_FILE_RE, unpacked)
        if url:
            return url
    return None


class LuluvdoExtractor(BaseStreamExtractor):
    key = HosterKey.LULUVDO

    async def _extract(self, url: str) -> StreamSource | None:
        headers = {"User-Agent": MOBILE_FIREFOX_USER_AGENT}
        resp = await self._fetch(url, headers=headers)
        file_code = _file_code(resp.url or url)
        if not file_code:
            return None

        embed_url = EMBED_URL.format(file_code=file_code)
        embed = await self._fetch(embed_url, headers=headers)
        video_url = _extract_file(embed.body)
        if not video_url:
            return None
        return self._source(video_url, headers=headers, requires_headers=True)
