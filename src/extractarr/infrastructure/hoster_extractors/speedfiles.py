"""SpeedFiles extractor - layered string obfuscation in a single variable."""

from __future__ import annotations

import re

import structlog

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.entities.media import StreamSource
from extractarr.infrastructure.common.codecs import (
    b64decode_text,
    char_shift,
    hex_to_chars,
    swap_case,
)
from extractarr.infrastructure.common.patterns import first_group

from .base import BaseStreamExtractor, browser_headers

log = structlog.get_logger(__name__)

_PAYLOAD_RE = re.compile(r'var _0x5opu234\s*=\s*"([^"]+)"')


def _decode_payload(encoded: str) -> str | None:
    """base64, swap case, reverse, base64, reverse, hex, shift -3,
    swap case, reverse, base64."""
    try:
        text = b64decode_text(encoded)
        text = swap_case(text)[::-1]
        text = b64decode_text(text)[::-1]
        text = char_shift(hex_to_chars(text), 3)
        text = swap_case(text)[::-1]
        return b64decode_text(text).strip()
    except ValueError as exc:
        log.debug("speedfiles_decode_failed", error=str(exc))
        return None


class SpeedFilesExtractor(BaseStreamExtractor):
    key = HosterKey.SPEEDFILES

    async def _extract(self, url: str) -> StreamSource | None:
        resp = await self._fetch(url, headers=browser_headers())
        payload = first_group(_PAYLOAD_RE, resp.body)
        if not payload:
            return None
        video_url = _decode_payload(payload)
        if not video_url or not video_url.startswith("http"):
            return None
        return self._source(video_url)
