"""Shared plumbing for per-hoster stream extractors.

Subclasses set ``key`` and implement ``_extract``. They may raise
``ExtractarrError`` subclasses (usually via ``_fetch``) or return None;
``extract`` turns every failure into None with a structured log line.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.entities.http import HttpResponse
from extractarr.domain.entities.media import StreamFormat, StreamSource
from extractarr.domain.exceptions import ExtractarrError
from extractarr.domain.ports.http import HttpCapability
from extractarr.infrastructure.common.formats import infer_format
from extractarr.infrastructure.http.constants import DEFAULT_USER_AGENT
from extractarr.infrastructure.http.response import raise_for_response

log = structlog.get_logger(__name__)


class BaseStreamExtractor:
    key: HosterKey

    def __init__(self, http: HttpCapability) -> None:
        self._http = http

    @property
    def name(self) -> str:
        return self.key.value

    @property
    def display_name(self) -> str:
        return self.key.display_name

    async def extract(self, url: str) -> StreamSource | None:
        try:
            source = await self._extract(url)
        except ExtractarrError as exc:
            log.warning(
                "hoster_extract_error",
                hoster=self.name,
                url=url,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

        if source is None:
            log.warning("hoster_extract_no_match", hoster=self.name, url=url)
            return None

        log.info(
            "hoster_extract_success",
            hoster=self.name,
            url=url,
            format=source.format.value,
        )
        return source

    async def _extract(self, url: str) -> StreamSource | None:
        raise NotImplementedError(f"{type(self).__name__}._extract() not implemented")

    async def _fetch(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> HttpResponse:
        """GET ``url`` and raise on transport failure or non-2xx status."""
        response = await self._http.get(url, headers=headers)
        return raise_for_response(response, context=self.display_name)

    def _source(
        self,
        url: str,
        *,
        fmt: StreamFormat | None = None,
        headers: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> StreamSource:
        return StreamSource(
            url=url,
            format=fmt or infer_format(url),
            quality="auto",
            server=self.display_name,
            headers=dict(headers or {}),
            **kwargs,
        )


def browser_headers(
    referer: str | None = None, extra: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Desktop browser User-Agent plus optional Referer."""
    headers = {"User-Agent": DEFAULT_USER_AGENT}
    if referer:
        headers["Referer"] = referer
    if extra:
        headers.update(extra)
    return headers
