"""Dean Edwards ``p,a,c,k,e,d`` unpacker.

Packed payloads are reversed by dictionary substitution only. The packed
script is never evaluated.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

PACKED_SCRIPT_RE = re.compile(
    r"eval\s*\(\s*function\s*\(\s*p\s*,\s*a\s*,\s*c\s*,\s*k\s*,\s*e\s*,\s*d\s*\)"
)

_PACKED_ARGS_RE = re.compile(
    r"}\s*\(\s*'(.*?)',\s*(\d+),\s*(\d+),\s*'([^']*)'\s*\.split\(\s*'\|'\s*\)",
    re.DOTALL,
)

# Packer token alphabet: base36 digits, then A-Z for radixes up to 62.
_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_ALPHABET_INDEX = {ch: i for i, ch in enumerate(_ALPHABET)}

# Chunk scanned after each eval() marker.
_MAX_PACKED_CHUNK = 65536


def _decode_token(word: str, radix: int) -> int | None:
    value = 0
    for ch in word:
        digit = _ALPHABET_INDEX.get(ch)
        if digit is None or digit >= radix:
            return None
        value = value * radix + digit
    return value


def unpack_packed_js(packed: str) -> str | None:
    """Unpack one packed script, or return None if ``packed`` is not one."""
    match = _PACKED_ARGS_RE.search(packed)
    if not match:
        return None

    payload = match.group(1).replace("\\'", "'")
    radix = int(match.group(2))
    count = int(match.group(3))
    keywords = match.group(4).split("|")
    if not 2 <= radix <= len(_ALPHABET):
        return None
    if len(keywords) < count:
        keywords.extend([""] * (count - len(keywords)))

    def _replace_word(m: re.Match[str]) -> str:
        word = m.group(0)
        index = _decode_token(word, radix)
        if index is not None and index < len(keywords) and keywords[index]:
            return keywords[index]
        return word

    return re.sub(r"\b\w+\b", _replace_word, payload)


def iter_unpacked_scripts(html: str) -> Iterator[str]:
    """Yield the unpacked source of every packed script in ``html``."""
    for pm in PACKED_SCRIPT_RE.finditer(html):
        chunk = html[pm.start() : pm.start() + _MAX_PACKED_CHUNK]
        unpacked = unpack_packed_js(chunk)
        if unpacked:
            yield unpacked
