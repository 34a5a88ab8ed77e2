from .hoster import HosterKey
from .http import HttpResponse
from .media import (
    AnimeDetails,
    AnimeStatus,
    AnimeSummary,
    CacheEntry,
    Episode,
    HosterInfo,
    PaginatedResult,
    Season,
    StreamFormat,
    StreamLanguage,
    StreamSource,
)

__all__ = [
    "AnimeDetails",
    "AnimeStatus",
    "AnimeSummary",
    "CacheEntry",
    "Episode",
    "HosterInfo",
    "HosterKey",
    "HttpResponse",
    "PaginatedResult",
    "Season",
    "StreamFormat",
    "StreamLanguage",
    "StreamSource",
]
