"""HTML entity decoding for free-text fields."""

from __future__ import annotations

import re

# Fixed named-entity table; anything else is left as-is.
_NAMED_ENTITIES: dict[str, str] = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&#039;": "'",
    "&nbsp;": " ",
    "&ndash;": "–",
    "&mdash;": "—",
    "&hellip;": "…",
    "&#8230;": "…",
    "&uuml;": "ü",
    "&ouml;": "ö",
    "&auml;": "ä",
    "&Uuml;": "Ü",
    "&Ouml;": "Ö",
    "&Auml;": "Ä",
    "&szlig;": "ß",
}

_DECIMAL_RE = re.compile(r"&#(\d+);")
_HEX_RE = re.compile(r"&#x([0-9a-f]+);", re.IGNORECASE)


def _codepoint(value: int) -> str:
    try:
        return chr(value)
    except (ValueError, OverflowError):
        return "�"


def decode_html_entities(text: str | None) -> str:
    """Decode the named-entity table, then decimal and hex references.

    Substitution is sequential (``&amp;`` first), so ``&amp;lt;`` decodes
    to ``<``.
    """
    if not text:
        return ""
    result = text
    for entity, char in _NAMED_ENTITIES.items():
        result = result.replace(entity, char)
    result = _DECIMAL_RE.sub(lambda m: _codepoint(int(m.group(1), 10)), result)
    result = _HEX_RE.sub(lambda m: _codepoint(int(m.group(1), 16)), result)
    return result
