"""Error taxonomy for fetching, parsing and stream extraction.

None of these cross the provider facade: they are recovered there and
turned into ``None``, empty lists or error-tagged results.
"""

from __future__ import annotations


class ExtractarrError(Exception):
    """Base class for all engine errors."""


class ConnectivityError(ExtractarrError):
    """Transport failure (status 0 sentinel from the HTTP capability)."""


class HttpStatusError(ExtractarrError):
    """Upstream answered with a non-2xx status."""

    def __init__(self, status: int, status_text: str = "", url: str = "") -> None:
        self.status = status
        self.status_text = status_text
        self.url = url
        super().__init__(f"HTTP {status} {status_text}".rstrip())


class ParseError(ExtractarrError):
    """Expected structure (JSON, markup, id shape) could not be parsed."""


class UnsupportedHosterError(ExtractarrError):
    """No registry entry matches the URL."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Unsupported hoster: {url}")


class RedirectUnresolvedError(ExtractarrError):
    """All redirect resolution heuristics were exhausted."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Could not resolve redirect: {url}")


class ExtractionFailure(ExtractarrError):
    """The hoster was recognized but no extraction pattern yielded a URL."""

    def __init__(self, hoster: str, url: str) -> None:
        self.hoster = hoster
        self.url = url
        super().__init__(f"{hoster}: no stream found at {url}")
