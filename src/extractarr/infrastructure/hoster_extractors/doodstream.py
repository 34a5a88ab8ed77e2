"""Doodstream extractor - the playable URL is synthesized, not scraped.

GET embed page -> ``/pass_md5/`` path + token -> GET pass_md5 endpoint
(returns the base URL) -> base + 10 random ``[A-Za-z0-9]`` characters +
``?token=<token>&expiry=<unix seconds>``.

May fail when a captcha is served; extraction then yields None.
"""

from __future__ import annotations

import re
import time
from typing import Callable

import structlog

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.entities.media import StreamFormat, StreamSource
from extractarr.infrastructure.common.codecs import random_token
from extractarr.infrastructure.common.patterns import first_group, origin

from .base import BaseStreamExtractor, browser_headers

log = structlog.get_logger(__name__)

RANDOM_SUFFIX_LENGTH = 10

_PASS_MD5_GET_RE = re.compile(r"\$\.get\(\s*'([^']*/pass_md5/[^']*)'")
_PASS_MD5_PATH_RE = re.compile(r"(/pass_md5/[\w-]+/[\w-]+)")
_TOKEN_RE = re.compile(r"token=([a-zA-Z0-9]+)")


def _find_pass_md5_path(html: str) -> str | None:
    return first_group(_PASS_MD5_GET_RE, html) or first_group(_PASS_MD5_PATH_RE, html)


def _find_token(html: str, pass_path: str) -> str | None:
    """Inline ``token=`` value, else the last pass_md5 path segment."""
    token = first_group(_TOKEN_RE, html)
    if token:
        return token
    tail = pass_path.rstrip("/").rsplit("/", 1)[-1]
    return tail or None


def _has_captcha(html: str) -> bool:
    return (
        "op=validate&gc_response=" in html
        or "data-sitekey=" in html
        or "cf-turnstile" in html.lower()
    )


def build_video_url(
    base: str,
    token: str,
    *,
    now: Callable[[], float] = time.time,
) -> str:
    suffix = random_token(RANDOM_SUFFIX_LENGTH)
    return f"{base}{suffix}?token={token}&expiry={int(now())}"


class DoodstreamExtractor(BaseStreamExtractor):
    key = HosterKey.DOODSTREAM

    async def _extract(self, url: str) -> StreamSource | None:
        resp = await self._fetch(url, headers=browser_headers(url))
        html = resp.body
        page_url = resp.url or url

        pass_path = _find_pass_md5_path(html)
        if not pass_path:
            if _has_captcha(html):
                log.warning("doodstream_captcha_required", url=url)
            return None
        token = _find_token(html, pass_path)
        if not token:
            return None

        site = origin(page_url)
        pass_url = pass_path if pass_path.startswith("http") else f"{site}{pass_path}"
        pass_resp = await self._fetch(pass_url, headers=browser_headers(page_url))
        base = pass_resp.body.strip()
        if not base.startswith("http"):
            log.warning("doodstream_invalid_video_base", base=base[:50])
            return None

        return self._source(
            build_video_url(base, token),
            fmt=StreamFormat.MP4,
            headers={"Referer": f"{site}/"},
            requires_headers=True,
        )
