"""Domain entities for catalog and stream data.

Pure value objects: no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

AnimeStatus = Literal["Ongoing", "Completed"]


class StreamFormat(str, Enum):
    """Container/transport of a stream URL."""

    M3U8 = "m3u8"
    MP4 = "mp4"
    MKV = "mkv"
    WEBM = "webm"
    DASH = "dash"
    TORRENT = "torrent"
    EMBED = "embed"
    REDIRECT = "redirect"

    @property
    def is_playable(self) -> bool:
        """False for hoster pages and provider indirections."""
        return self not in (StreamFormat.EMBED, StreamFormat.REDIRECT)


@dataclass(frozen=True)
class StreamLanguage:
    """Audio/subtitle language of a stream link."""

    code: str  # "de", "en-sub", "de-sub"
    label: str


@dataclass(frozen=True)
class StreamSource:
    """A single stream link, either directly playable or still a pointer."""

    url: str
    format: StreamFormat
    quality: str = "HD"
    server: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    is_default: bool = False
    requires_headers: bool = False
    force_hls: bool = False
    language: StreamLanguage | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.url, str):
            raise TypeError(f"StreamSource.url must be a str, got {type(self.url).__name__}")
        if not self.url:
            raise ValueError("StreamSource.url must not be empty")

    @property
    def needs_extraction(self) -> bool:
        return not self.format.is_playable

    def as_default(self, is_default: bool = True) -> StreamSource:
        return replace(self, is_default=is_default)


@dataclass(frozen=True)
class Episode:
    """One episode (or movie) of an anime.

    ``id`` follows the wire convention ``"{season}-{episode}"`` for series
    episodes and ``"filme-{n}"`` for entries of the movies pseudo-season.
    """

    id: str
    number: int
    season: int
    title: str
    thumbnail: str | None = None
    is_movie: bool = False
    link: str = ""
    sources: list[StreamSource] = field(default_factory=list)


@dataclass(frozen=True)
class Season:
    season_number: int  # 0 = movies
    title: str
    is_movies: bool = False
    link: str = ""
    episodes: list[Episode] = field(default_factory=list)

    @property
    def episode_count(self) -> int:
        return len(self.episodes)


@dataclass(frozen=True)
class AnimeSummary:
    """Catalog card as returned by search and listing pages."""

    id: str
    title: str
    cover: str | None = None
    description: str = ""
    year: int | None = None
    link: str = ""


@dataclass(frozen=True)
class AnimeDetails:
    """Full anime record parsed from a catalog detail page."""

    id: str
    title: str
    alt_titles: list[str] = field(default_factory=list)
    cover: str | None = None
    banner: str | None = None
    description: str = ""
    genres: list[str] = field(default_factory=list)
    directors: list[str] = field(default_factory=list)
    actors: list[str] = field(default_factory=list)
    producers: list[str] = field(default_factory=list)
    countries: list[str] = field(default_factory=list)
    status: AnimeStatus | None = None
    start_year: int | None = None
    end_year: int | None = None
    fsk_rating: str | None = None
    imdb_id: str | None = None
    rating: float | None = None
    rating_count: int | None = None
    rating_max: int = 5
    trailer_url: str | None = None
    seasons: list[Season] = field(default_factory=list)
    anilist_id: int | None = None
    error: str | None = None

    @property
    def season_count(self) -> int:
        return sum(1 for s in self.seasons if not s.is_movies)

    @property
    def episode_count(self) -> int:
        return sum(s.episode_count for s in self.seasons if not s.is_movies)

    @property
    def has_movies(self) -> bool:
        return any(s.is_movies for s in self.seasons)

    @classmethod
    def failed(cls, anime_id: str, error: str) -> AnimeDetails:
        """Minimal placeholder returned when details cannot be loaded."""
        return cls(id=anime_id, title="Unknown", error=error)


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    results: list[T] = field(default_factory=list)
    has_next_page: bool = False
    current_page: int = 1
    total_results: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def empty(cls, page: int = 1, error: str | None = None) -> PaginatedResult[T]:
        return cls(results=[], has_next_page=False, current_page=page, error=error)


@dataclass(frozen=True)
class HosterInfo:
    name: str
    supported: bool
    key: str | None = None


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    inserted_at: float  # unix seconds
