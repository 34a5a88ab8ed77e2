"""Default-source selection policies.

``first`` keeps discovery order and marks the first source as default.
``quality`` orders sources by a resolution score (stable for ties) and
marks the best one.
"""

from __future__ import annotations

from typing import Literal

from extractarr.domain.entities.media import StreamSource

DefaultPolicy = Literal["first", "quality"]

# Checked in order; first token found in the quality label wins.
_QUALITY_SCORES: tuple[tuple[str, int], ...] = (
    ("2160p", 4),
    ("4k", 4),
    ("1080p", 3),
    ("720p", 2),
    ("480p", 1),
    ("360p", 0),
)
UNKNOWN_QUALITY_SCORE = -1


def quality_score(quality: str) -> int:
    lowered = quality.lower()
    for token, score in _QUALITY_SCORES:
        if token in lowered:
            return score
    return UNKNOWN_QUALITY_SCORE


def mark_default(
    sources: list[StreamSource], policy: DefaultPolicy = "first"
) -> list[StreamSource]:
    """Return ``sources`` with exactly one ``is_default`` (none if empty)."""
    if policy == "quality":
        ordered = sorted(sources, key=lambda s: quality_score(s.quality), reverse=True)
    elif policy == "first":
        ordered = list(sources)
    else:
        raise ValueError(f"Unknown default policy: {policy!r}")
    return [source.as_default(index == 0) for index, source in enumerate(ordered)]
