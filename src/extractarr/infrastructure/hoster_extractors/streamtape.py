"""Streamtape extractor - rebuilds the link from two split string literals.

The page assigns ``botlink.innerHTML = '<s1>' + ('<s2>').substring(n)``;
the playable URL is ``https:`` + s1 + s2 with the leading ``n`` characters
dropped (4 when no offset is written out). Older pages expose the
``id/expires/ip/token`` query block instead.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.entities.media import StreamFormat, StreamSource

from .base import BaseStreamExtractor, browser_headers

_BOTLINK_RE = re.compile(
    r"botlink[^\n]*?innerHTML\s*=\s*['\"](?P<s1>[^'\"]+)['\"]\s*\+\s*"
    r"\(\s*['\"](?P<s2>[^'\"]+)['\"]\s*\)(?P<subs>(?:\.substring\(\d+\))*)"
)
_SUBSTRING_RE = re.compile(r"\.substring\((\d+)\)")
_DEFAULT_OFFSET = 4

_PARAMS_RE = re.compile(
    r"(id=[^\"'&]*&expires=\d+&ip=[^\"'&]*&token=[^\"'&]*?)([\"'<])"
)


def _join_botlink(html: str) -> str | None:
    m = _BOTLINK_RE.search(html)
    if not m:
        return None
    offsets = [int(n) for n in _SUBSTRING_RE.findall(m.group("subs"))]
    offset = sum(offsets) if offsets else _DEFAULT_OFFSET
    joined = m.group("s1") + m.group("s2")[offset:]
    if joined.startswith("//"):
        return f"https:{joined}"
    if joined.startswith("http"):
        return joined
    return f"https://{joined.lstrip('/')}"


def _build_from_params(html: str, page_url: str) -> str | None:
    m = _PARAMS_RE.search(html)
    if not m:
        return None
    host = urlsplit(page_url).hostname or "streamtape.com"
    return f"https://{host}/get_video?{m.group(1)}&stream=1"


class StreamtapeExtractor(BaseStreamExtractor):
    key = HosterKey.STREAMTAPE

    async def _extract(self, url: str) -> StreamSource | None:
        resp = await self._fetch(url, headers=browser_headers())
        video_url = _join_botlink(resp.body) or _build_from_params(
            resp.body, resp.url or url
        )
        if not video_url:
            return None
        return self._source(video_url, fmt=StreamFormat.MP4)
