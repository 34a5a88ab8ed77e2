"""Filemoon extractor - iframe hop, then m3u8 from plain or packed config."""

from __future__ import annotations

import re

import structlog

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.entities.media import StreamFormat, StreamSource
from extractarr.infrastructure.common.patterns import absolute_url, first_group

from ._packer import iter_unpacked_scripts, unpack_packed_js
from .base import BaseStreamExtractor, browser_headers

log = structlog.get_logger(__name__)

FILEMOON_REFERER = "https://aniworld.to/"

_IFRAME_RE = re.compile(
    r"<iframe\s*(?:[^>]+\s)?src=['\"]([^'\"]+)['\"][^>]*>", re.IGNORECASE
)

_M3U8_PATTERNS = (
    re.compile(r'file:\s*"([^"]+\.m3u8[^"]*)"'),
    re.compile(r'source:\s*"([^"]+\.m3u8[^"]*)"'),
    re.compile(r'"sources":\s*\[\s*\{\s*"file":\s*"([^"]+\.m3u8[^"]*)"'),
    re.compile(r'sources\s*=\s*\[\s*\{\s*file:\s*"([^"]+\.m3u8[^"]*)"'),
)

_CFASYNC_SCRIPT_RE = re.compile(
    r"<script\s+[^>]*?data-cfasync=[\"']?false[\"']?[^>]*>(.+?)</script>",
    re.DOTALL | re.IGNORECASE,
)


def _find_m3u8(text: str) -> str | None:
    for pattern in _M3U8_PATTERNS:
        url = first_group(pattern, text)
        if url:
            return url
    return None


def _find_packed_m3u8(html: str) -> str | None:
    """Unpack ``data-cfasync="false"`` scripts first, then any packed script."""
    for m in _CFASYNC_SCRIPT_RE.finditer(html):
        script = m.group(1).strip()
        if not script.startswith("eval("):
            continue
        unpacked = unpack_packed_js(script)
        if unpacked:
            url = _find_m3u8(unpacked)
            if url:
                return url
    for unpacked in iter_unpacked_scripts(html):
        url = _find_m3u8(unpacked)
        if url:
            return url
    return None


class FilemoonExtractor(BaseStreamExtractor):
    key = HosterKey.FILEMOON

    async def _extract(self, url: str) -> StreamSource | None:
        resp = await self._fetch(url, headers=browser_headers(FILEMOON_REFERER))
        html = resp.body

        iframe_src = first_group(_IFRAME_RE, html)
        if iframe_src:
            frame_url = absolute_url(iframe_src, resp.url or url)
            frame = await self._http.get(
                frame_url,
                headers=browser_headers(url, {"Sec-Fetch-Dest": "iframe"}),
            )
            if frame.ok:
                html = frame.body
            else:
                log.debug("filemoon_iframe_failed", url=frame_url, status=frame.status)

        video_url = _find_m3u8(html) or _find_packed_m3u8(html)
        if not video_url:
            return None
        return self._source(video_url, fmt=StreamFormat.M3U8)
