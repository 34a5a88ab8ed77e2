"""String codecs used by hoster obfuscation schemes."""

from __future__ import annotations

import base64
import secrets
import string

_TOKEN_ALPHABET = string.ascii_letters + string.digits


def b64decode_text(data: str) -> str:
    """Decode base64 with padding fix (raises ``ValueError`` on bad input)."""
    data = data.strip()
    padding = 4 - len(data) % 4
    if padding != 4:
        data += "=" * padding
    return base64.b64decode(data).decode("utf-8", errors="replace")


def rot13(text: str) -> str:
    """Apply ROT13 to ASCII letters only."""
    result: list[str] = []
    for ch in text:
        code = ord(ch)
        if 0x41 <= code <= 0x5A:  # A-Z
            code = (code - 0x41 + 13) % 26 + 0x41
        elif 0x61 <= code <= 0x7A:  # a-z
            code = (code - 0x61 + 13) % 26 + 0x61
        result.append(chr(code))
    return "".join(result)


def swap_case(text: str) -> str:
    """Swap ASCII letter case (non-letters untouched)."""
    return "".join(
        ch.lower() if "A" <= ch <= "Z" else ch.upper() if "a" <= ch <= "z" else ch
        for ch in text
    )


def char_shift(text: str, shift: int) -> str:
    """Shift each character code down by ``shift``."""
    return "".join(chr(ord(ch) - shift) for ch in text)


def hex_to_chars(text: str) -> str:
    """Interpret ``text`` as consecutive two-digit hex codes."""
    return "".join(chr(int(text[i : i + 2], 16)) for i in range(0, len(text) - 1, 2))


def random_token(length: int) -> str:
    """Uniformly random ``[A-Za-z0-9]`` string."""
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))
