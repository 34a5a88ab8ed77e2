"""Resolution of provider-side indirection links (``/redirect/123``).

One GET is issued; the outcome is then examined by four heuristics in
fixed order, first hit wins:

1. the effective URL after HTTP redirects, unless it is itself an
   indirection link
2. an HTML meta-refresh target
3. a ``window.location`` / ``document.location`` assignment
4. an iframe whose src belongs to a known hoster

When a page carries several of these signals the earliest heuristic in
this order decides, whatever their position in the markup.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping

import structlog

from extractarr.domain.entities.http import HttpResponse
from extractarr.domain.ports.http import HttpCapability
from extractarr.infrastructure.common.patterns import absolute_url, first_group

from .registry import identify

log = structlog.get_logger(__name__)

_INDIRECTION_RE = re.compile(r"/(?:redirect|go)/\d+(?:[/?#]|$)", re.IGNORECASE)

_META_REFRESH_RES = (
    re.compile(
        r"<meta[^>]*http-equiv=[\"']refresh[\"'][^>]*content=[\"'][^\"']*url=([^\"'>\s]+)",
        re.IGNORECASE,
    ),
    re.compile(
        r"<meta[^>]*content=[\"'][^\"']*url=([^\"'>\s]+)[^>]*http-equiv=[\"']refresh[\"']",
        re.IGNORECASE,
    ),
)
_LOCATION_RE = re.compile(
    r"(?:window|document)\.location(?:\.href)?\s*=\s*[\"']([^\"']+)[\"']",
    re.IGNORECASE,
)
_IFRAME_SRC_RE = re.compile(r"<iframe\b[^>]*?\ssrc=[\"']([^\"']+)[\"']", re.IGNORECASE)


def is_indirection(url: str) -> bool:
    """True for provider indirection shapes like ``/redirect/123``, ``/go/7``."""
    return bool(_INDIRECTION_RE.search(url))


def from_effective_url(requested: str, response: HttpResponse) -> str | None:
    if response.url and response.url != requested and not is_indirection(response.url):
        return response.url
    return None


def from_meta_refresh(response: HttpResponse) -> str | None:
    for pattern in _META_REFRESH_RES:
        target = first_group(pattern, response.body)
        if target:
            return absolute_url(target, response.url)
    return None


def from_script_location(response: HttpResponse) -> str | None:
    target = first_group(_LOCATION_RE, response.body)
    if target:
        return absolute_url(target, response.url)
    return None


def from_hoster_iframe(response: HttpResponse) -> str | None:
    for src in _IFRAME_SRC_RE.findall(response.body):
        candidate = absolute_url(src, response.url)
        if identify(candidate) is not None:
            return candidate
    return None


_BODY_HEURISTICS: tuple[tuple[str, Callable[[HttpResponse], str | None]], ...] = (
    ("meta_refresh", from_meta_refresh),
    ("script_location", from_script_location),
    ("hoster_iframe", from_hoster_iframe),
)


class RedirectResolver:
    """Turns an indirection URL into the hoster URL behind it."""

    def __init__(
        self,
        http: HttpCapability,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._http = http
        self._headers = dict(headers or {})

    is_indirection = staticmethod(is_indirection)

    async def resolve(self, url: str) -> str | None:
        """Return the resolved URL, or None when every heuristic fails."""
        response = await self._http.get(url, headers=self._headers or None)
        if response.is_connectivity_failure:
            log.warning("redirect_fetch_failed", url=url, error=response.error)
            return None

        target = from_effective_url(url, response)
        if target:
            log.debug("redirect_resolved", url=url, via="effective_url", target=target)
            return target

        if response.body:
            for via, heuristic in _BODY_HEURISTICS:
                target = heuristic(response)
                if target:
                    log.debug("redirect_resolved", url=url, via=via, target=target)
                    return target

        log.info("redirect_unresolved", url=url, status=response.status)
        return None
