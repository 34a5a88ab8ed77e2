"""Regex helpers for pulling attributes, JSON literals and URLs out of markup.

Markup is deliberately never parsed into a DOM: every extraction is a
named pattern so fixtures pin the exact matching behavior on malformed
pages.
"""

from __future__ import annotations

import json
import re
from typing import Any
from urllib.parse import urljoin, urlsplit

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def first_group(
    pattern: str | re.Pattern[str], text: str, flags: int = 0
) -> str | None:
    """Return group 1 of the first match, or None."""
    regex = re.compile(pattern, flags) if isinstance(pattern, str) else pattern
    m = regex.search(text)
    if m is None:
        return None
    return m.group(1)


def all_groups(
    pattern: str | re.Pattern[str], text: str, flags: int = 0
) -> list[str]:
    """Return group 1 of every match, in document order."""
    regex = re.compile(pattern, flags) if isinstance(pattern, str) else pattern
    return [m.group(1) for m in regex.finditer(text)]


def extract_attribute(html: str, tag: str, attribute: str) -> str | None:
    """Value of ``attribute`` on the first ``<tag>`` that carries it."""
    m = re.search(
        rf"<{tag}\b[^>]*?\s{re.escape(attribute)}\s*=\s*([\"'])(.*?)\1",
        html,
        re.IGNORECASE | re.DOTALL,
    )
    if m is None:
        return None
    return m.group(2)


def extract_script_json(html: str, variable: str) -> Any | None:
    """Parse the JSON object/array literal assigned to a script variable.

    Matches ``var x = {...};``, ``let x = [...]`` and ``x = {...}``. Returns
    None when the variable is absent or its literal is not valid JSON.
    """
    m = re.search(
        rf"(?:var|let|const)?\s*\b{re.escape(variable)}\s*=\s*([\[{{].*?[\]}}])\s*;",
        html,
        re.DOTALL,
    )
    if m is None:
        return None
    try:
        return json.loads(m.group(1))
    except ValueError:
        return None


def strip_tags(html: str) -> str:
    """Drop tags and collapse whitespace."""
    return _WS_RE.sub(" ", _TAG_RE.sub(" ", html)).strip()


def absolute_url(url: str, base: str) -> str:
    """Resolve ``url`` against ``base``.

    Protocol-relative URLs (``//host/path``) become ``https:``.
    """
    url = url.strip()
    if url.startswith("//"):
        return f"https:{url}"
    if url.startswith(("http://", "https://")):
        return url
    return urljoin(base, url)


def origin(url: str) -> str:
    """``scheme://host`` of a URL."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def path_segments(url: str) -> list[str]:
    """Non-empty path segments of a URL."""
    return [p for p in urlsplit(url).path.split("/") if p]
