"""VOE extractor - follows the client-side hop, then decodes the playlist.

The first page only navigates (``window.location.href = '.../e/<token>'``)
to a secondary page. The secondary page is tried, in order, for:

1. a single-quoted ``'hls'`` field holding a base64-encoded playlist URL
2. the ``application/json`` obfuscation chain (ROT13, separator removal,
   base64, char shift -3, reverse, base64, JSON ``source``)
3. plain hls/mp4 literals
"""

from __future__ import annotations

import json
import re

import structlog

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.entities.media import StreamSource
from extractarr.infrastructure.common.codecs import b64decode_text, char_shift, rot13
from extractarr.infrastructure.common.patterns import first_group

from .base import BaseStreamExtractor, browser_headers

log = structlog.get_logger(__name__)

VOE_REFERER = "https://aniworld.to/"

_JS_REDIRECT_RE = re.compile(
    r"window\.location\.href\s*=\s*['\"](https://[^/'\"]+/e/\w+)['\"]\s*;"
)
_META_REFRESH_RE = re.compile(
    r"<meta[^>]*http-equiv=[\"']refresh[\"'][^>]*content=[\"'][^\"']*url=([^\"'>\s]+)",
    re.IGNORECASE,
)
_HLS_FIELD_RE = re.compile(r"'hls'\s*:\s*'([^']+)'")
_JSON_SCRIPT_RE = re.compile(
    r"<script\s+type=[\"']application/json[\"'][^>]*>([^<]+)</script>",
    re.IGNORECASE,
)

# Separator tokens sprinkled into the ROT13 text.
_SEPARATOR_TOKENS = ("@$", "^^", "~@", "%?", "*~", "!!", "#&")

_DIRECT_PATTERNS = (
    re.compile(r"'hls':\s*'([^']+\.m3u8[^']*)'"),
    re.compile(r'"hls":\s*"([^"]+\.m3u8[^"]*)"'),
    re.compile(r"source:\s*['\"]([^'\"]+\.m3u8[^'\"]*)['\"]"),
    re.compile(r"sources:\s*\[\s*['\"]([^'\"]+\.m3u8[^'\"]*)['\"]"),
    re.compile(r"'mp4':\s*'([^']+\.mp4[^']*)'"),
    re.compile(r'"mp4":\s*"([^"]+\.mp4[^"]*)"'),
    re.compile(r"source:\s*['\"]([^'\"]+\.mp4[^'\"]*)['\"]"),
)


def _find_redirect(html: str) -> str | None:
    return first_group(_JS_REDIRECT_RE, html) or first_group(_META_REFRESH_RE, html)


def _decode_hls_field(html: str) -> str | None:
    """Base64-decode the single-quoted ``'hls'`` value."""
    value = first_group(_HLS_FIELD_RE, html)
    if not value:
        return None
    if value.startswith("http"):
        return value
    try:
        decoded = b64decode_text(value).strip()
    except ValueError:
        log.debug("voe_hls_not_base64", value=value[:40])
        return None
    return decoded if decoded.startswith("http") else None


def _deobfuscate_json_payload(encoded: str) -> dict | None:
    text = rot13(encoded)
    for token in _SEPARATOR_TOKENS:
        text = text.replace(token, "_")
    text = text.replace("_", "")
    try:
        text = char_shift(b64decode_text(text), 3)[::-1]
        data = json.loads(b64decode_text(text))
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _decode_json_script(html: str) -> str | None:
    raw = first_group(_JSON_SCRIPT_RE, html)
    if not raw:
        return None
    raw = raw.strip()
    # Payload is wrapped as ["..."].
    if len(raw) <= 4:
        return None
    data = _deobfuscate_json_payload(raw[2:-2])
    if not data:
        return None
    source = data.get("source") or data.get("direct_access_url")
    return source if isinstance(source, str) and source else None


def _find_direct_source(html: str) -> str | None:
    for pattern in _DIRECT_PATTERNS:
        url = first_group(pattern, html)
        if url:
            return url
    return None


def _extract_voe_source(html: str) -> str | None:
    return (
        _decode_hls_field(html)
        or _decode_json_script(html)
        or _find_direct_source(html)
    )


class VoeExtractor(BaseStreamExtractor):
    key = HosterKey.VOE

    async def _extract(self, url: str) -> StreamSource | None:
        resp = await self._fetch(url, headers=browser_headers(VOE_REFERER))
        html = resp.body

        target = _find_redirect(html)
        if target:
            log.debug("voe_follow_redirect", url=url, target=target)
            resp = await self._fetch(target, headers=browser_headers(url))
            html = resp.body

        video_url = _extract_voe_source(html)
        if not video_url:
            return None
        return self._source(video_url)
