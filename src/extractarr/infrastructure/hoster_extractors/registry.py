"""Hoster registry: URL classification and the closed extractor table.

Classification is a pure function of the URL's hostname, tested against
an ordered table of domain patterns (first match wins). Patterns are
anchored on a host-label boundary so no two hosters can claim the same
host.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from urllib.parse import urlsplit

import structlog

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.entities.media import HosterInfo
from extractarr.domain.ports.stream_extractor import StreamExtractorPort

log = structlog.get_logger(__name__)

# (key, domain regex) in declaration order.
HOSTER_PATTERNS: tuple[tuple[HosterKey, str], ...] = (
    (HosterKey.VIDOZA, r"vidoza\.(net|org|co)"),
    (HosterKey.VIDMOLY, r"vidmoly\.(to|me|com|net|biz)"),
    (HosterKey.VOE, r"voe\.(sx|bar)|voe-network\.(net|com)"),
    (HosterKey.STREAMTAPE, r"streamtape\.(com|net|to|xyz)"),
    (HosterKey.SPEEDFILES, r"speedfiles\.(net|com)"),
    (HosterKey.LULUVDO, r"luluvdo\.(com|net)"),
    (HosterKey.LOADX, r"loadx\.(ws|to|net)"),
    (HosterKey.FILEMOON, r"filemoon\.(sx|to|in|wf)"),
    (HosterKey.DOODSTREAM, r"doodstream\.(com|co)|dood\.(re|watch|wf|to|la|pm|sh|li)"),
)

_COMPILED: tuple[tuple[HosterKey, re.Pattern[str]], ...] = tuple(
    (key, re.compile(rf"(?:^|\.)(?:{pattern})$", re.IGNORECASE))
    for key, pattern in HOSTER_PATTERNS
)


def extract_domain(url: str) -> str:
    """Lower-cased hostname of ``url`` ('' when there is none)."""
    try:
        return (urlsplit(url.strip()).hostname or "").lower()
    except ValueError:
        return ""


def identify(url: str) -> HosterKey | None:
    """Return the hoster key for ``url``, or None if no pattern matches."""
    host = extract_domain(url)
    if not host:
        return None
    for key, pattern in _COMPILED:
        if pattern.search(host):
            return key
    return None


def hoster_info(url: str) -> HosterInfo:
    key = identify(url)
    if key is None:
        return HosterInfo(name="Unknown", supported=False, key=None)
    return HosterInfo(name=key.display_name, supported=True, key=key.value)


def supported_hosters() -> list[dict[str, str]]:
    return [
        {"key": key.value, "name": key.display_name, "pattern": pattern}
        for key, pattern in HOSTER_PATTERNS
    ]


class HosterRegistry:
    """Maps every ``HosterKey`` to exactly one extractor.

    Construction fails if any key is left without an extractor, so a
    lookup for an identified hoster can never miss.
    """

    def __init__(self, extractors: Mapping[HosterKey, StreamExtractorPort]) -> None:
        missing = [key.value for key in HosterKey if key not in extractors]
        if missing:
            raise ValueError(f"No extractor registered for: {', '.join(missing)}")
        self._extractors = dict(extractors)
        log.debug("hoster_registry_init", hosters=[k.value for k in self._extractors])

    identify = staticmethod(identify)
    hoster_info = staticmethod(hoster_info)
    supported_hosters = staticmethod(supported_hosters)

    def is_supported(self, url: str) -> bool:
        return identify(url) is not None

    def extractor_for(self, key: HosterKey) -> StreamExtractorPort:
        return self._extractors[key]

    def __len__(self) -> int:
        return len(self._extractors)
