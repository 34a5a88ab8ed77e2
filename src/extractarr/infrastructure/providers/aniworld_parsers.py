"""Regex parsers for aniworld.to pages.

Every function is pure (markup in, entities out) so fixtures can pin the
exact matching behavior. Free text passes through
``decode_html_entities`` before it is returned.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from extractarr.domain.entities.media import (
    AnimeDetails,
    AnimeSummary,
    Episode,
    Season,
    StreamFormat,
    StreamLanguage,
    StreamSource,
)
from extractarr.domain.exceptions import ParseError
from extractarr.infrastructure.common.html_text import decode_html_entities
from extractarr.infrastructure.common.patterns import (
    absolute_url,
    all_groups,
    first_group,
    strip_tags,
)

MOVIES_SEASON = 0
MOVIES_SLUG = "filme"

LANGUAGES: dict[str, StreamLanguage] = {
    "1": StreamLanguage("de", "German Dubbed"),
    "2": StreamLanguage("en-sub", "Japanese (English Subtitles)"),
    "3": StreamLanguage("de-sub", "Japanese (German Subtitles)"),
}

# Fallback scan order for hoster links outside the <li> markup.
NAMED_HOSTER_TARGETS: tuple[tuple[str, str], ...] = (
    ("VOE", "voe"),
    ("Vidoza", "vidoza"),
    ("Vidmoly", "vidmoly"),
    ("Streamtape", "streamtape"),
    ("Doodstream", "dood"),
    ("Filemoon", "filemoon"),
    ("SpeedFiles", "speedfiles"),
    ("Luluvdo", "luluvdo"),
)

_EPISODE_LINK_RE = re.compile(r"staffel-(\d+)/episode-(\d+)", re.IGNORECASE)
_MOVIE_LINK_RE = re.compile(r"filme/(?:episode|film)-(\d+)", re.IGNORECASE)
_SEASON_NAV_RE = re.compile(
    r"<a[^>]*href=\"[^\"]*/(staffel-(\d+)|filme)\"[^>]*>", re.IGNORECASE
)
_EPISODE_ID_RE = re.compile(r"^(\d+)-(\d+)$")
_MOVIE_ID_RE = re.compile(r"^filme-(\d+)$", re.IGNORECASE)

_CARD_RE = re.compile(
    r"<a\b([^>]*\bhref=\"/anime/stream/([^\"/?#]+)/?\"[^>]*)>(.*?)</a>",
    re.IGNORECASE | re.DOTALL,
)
_STREAM_LI_RE = re.compile(
    r"<li[^>]*class=\"[^\"]*episodeLink(\d+)[^\"]*\"[^>]*"
    r"data-lang-key=\"(\d+)\"[^>]*data-link-id=\"(\d+)\"[^>]*"
    r"data-link-target=\"([^\"]+)\"[^>]*>(.*?)</li>",
    re.IGNORECASE | re.DOTALL,
)
_REDIRECT_ID_RE = re.compile(r"redirect/(\d+)", re.IGNORECASE)
_YEAR_RE = re.compile(r"\d{4}")

_TITLE_RE = re.compile(
    r"<h1[^>]*itemprop=\"name\"[^>]*>\s*<span>([^<]+)</span>\s*</h1>", re.IGNORECASE
)
_FALLBACK_TITLE_RE = re.compile(
    r"<h1[^>]*>(?:\s*<span>)?([^<]+)(?:</span>)?\s*</h1>", re.IGNORECASE
)
_H1_TITLE_ATTR_RE = re.compile(
    r"<h1[^>]*itemprop=\"name\"[^>]*title=\"([^\"]+)\"", re.IGNORECASE
)
_COVER_RE = re.compile(
    r"class=\"seriesCoverBox\"[^>]*>\s*(?:<[^>]+>\s*)*?<img([^>]*)>",
    re.IGNORECASE | re.DOTALL,
)
_BANNER_RE = re.compile(
    r"class=\"backdrop\"[^>]*background-image:\s*url\(['\"]?([^)'\"]+)['\"]?\)",
    re.IGNORECASE,
)
_DATE_TEMPLATE = r"itemprop=\"{prop}\"[^>]*>(?:\s*<[^>]+>)*\s*(\d{{4}}|Heute)"
_GENRE_RE = re.compile(
    r"<a(?=[^>]*class=\"genreButton[^\"]*\")(?=[^>]*itemprop=\"genre\")[^>]*>([^<]+)</a>",
    re.IGNORECASE,
)
_CAST_NAME_RE = re.compile(r"itemprop=\"name\">([^<]+)</span>", re.IGNORECASE)
_ONGOING_MARKER = "Heute"
_ANILIST_TITLE_PREFIX = "Animes Stream: "

# (field, css class, end marker) for the cast/crew blocks.
CAST_SECTIONS: tuple[tuple[str, str, str], ...] = (
    ("directors", "seriesDirector", "</li>"),
    ("actors", "seriesActor", '<div class="cf"></div>'),
    ("producers", "seriesProducer", '<div class="cf"></div>'),
    ("countries", "seriesCountry", '<div class="cf"></div>'),
)


def anime_path(anime_id: str) -> str:
    return f"/anime/stream/{anime_id}"


def episode_path(anime_id: str, episode_id: str) -> str:
    """Map a wire episode id onto its page path.

    ``"2-5"`` -> ``/anime/stream/<id>/staffel-2/episode-5`` and
    ``"filme-1"`` -> ``/anime/stream/<id>/filme/film-1``.
    """
    episode_id = episode_id.strip()
    m = _EPISODE_ID_RE.match(episode_id)
    if m is not None:
        season, number = m.groups()
        return f"{anime_path(anime_id)}/staffel-{int(season)}/episode-{int(number)}"
    m = _MOVIE_ID_RE.match(episode_id)
    if m is not None:
        return f"{anime_path(anime_id)}/{MOVIES_SLUG}/film-{int(m.group(1))}"
    raise ParseError(f"Malformed episode id: {episode_id!r}")


# ---------------------------------------------------------------------------
# search / listings
# ---------------------------------------------------------------------------


def parse_year(value: Any) -> int | None:
    """First four-digit year in ``value`` (``"(2020 - 2024)"`` -> 2020)."""
    if value is None:
        return None
    m = _YEAR_RE.search(str(value))
    return int(m.group(0)) if m else None


def parse_search_item(item: Any, base_url: str) -> AnimeSummary | None:
    """Map one ``/ajax/seriesSearch`` entry; entries without a link are dropped."""
    if not isinstance(item, dict):
        return None
    slug = str(item.get("link") or "").strip().strip("/")
    if not slug:
        return None
    cover = item.get("cover")
    return AnimeSummary(
        id=slug,
        title=decode_html_entities(item.get("name") or "Unknown"),
        cover=absolute_url(cover, f"{base_url}/") if cover else None,
        description=decode_html_entities(item.get("description") or ""),
        year=parse_year(item.get("productionYear")),
        link=anime_path(slug),
    )


def _card_cover(inner: str, base_url: str) -> str | None:
    src = first_group(r"<img[^>]*\sdata-src=\"([^\"]+)\"", inner, re.IGNORECASE)
    if src is None:
        src = first_group(r"<img[^>]*\ssrc=\"([^\"]+)\"", inner, re.IGNORECASE)
    return absolute_url(src, f"{base_url}/") if src else None


def _card_title(attrs: str, inner: str) -> str:
    title = first_group(r"<h3[^>]*>(.*?)</h3>", inner, re.IGNORECASE | re.DOTALL)
    if title is not None:
        title = strip_tags(title)
    if not title:
        title = first_group(r"\btitle=\"([^\"]*)\"", attrs, re.IGNORECASE)
    if not title:
        title = strip_tags(inner)
    return decode_html_entities(title or "").strip()


def scan_catalog_cards(html: str, base_url: str) -> list[AnimeSummary]:
    """Catalog cards of a listing page, deduplicated by slug in page order."""
    seen: set[str] = set()
    cards: list[AnimeSummary] = []
    for m in _CARD_RE.finditer(html):
        attrs, slug, inner = m.group(1), m.group(2), m.group(3)
        if slug in seen:
            continue
        title = _card_title(attrs, inner)
        if not title:
            continue
        seen.add(slug)
        cards.append(
            AnimeSummary(
                id=slug,
                title=title,
                cover=_card_cover(inner, base_url),
                link=anime_path(slug),
            )
        )
    return cards


# ---------------------------------------------------------------------------
# season / episode graph
# ---------------------------------------------------------------------------


def scan_episodes(html: str, anime_id: str) -> list[Episode]:
    """All episode links on a page, deduplicated and ordered.

    Movies come first (by number), then series episodes by (season,
    episode).
    """
    seen: set[str] = set()
    movies: list[Episode] = []
    episodes: list[Episode] = []

    for m in _MOVIE_LINK_RE.finditer(html):
        number = int(m.group(1))
        key = f"{MOVIES_SLUG}-{number}"
        if key in seen:
            continue
        seen.add(key)
        movies.append(
            Episode(
                id=key,
                number=number,
                season=MOVIES_SEASON,
                title=f"Film {number}",
                is_movie=True,
                link=episode_path(anime_id, key),
            )
        )

    for m in _EPISODE_LINK_RE.finditer(html):
        season, number = int(m.group(1)), int(m.group(2))
        key = f"{season}-{number}"
        if key in seen:
            continue
        seen.add(key)
        episodes.append(
            Episode(
                id=key,
                number=number,
                season=season,
                title=f"Staffel {season} - Episode {number}",
                link=episode_path(anime_id, key),
            )
        )

    movies.sort(key=lambda e: e.number)
    episodes.sort(key=lambda e: (e.season, e.number))
    return movies + episodes


def scan_season_numbers(html: str) -> list[int]:
    """Season numbers linked from the season navigation (0 = movies)."""
    numbers: set[int] = set()
    for m in _SEASON_NAV_RE.finditer(html):
        if m.group(1).lower() == MOVIES_SLUG:
            numbers.add(MOVIES_SEASON)
        else:
            numbers.add(int(m.group(2)))
    return sorted(numbers)


def build_seasons(html: str, anime_id: str) -> list[Season]:
    """Group the scanned episodes into seasons, movies first.

    Seasons linked from the navigation but without scanned episode links
    are kept with an empty episode list.
    """
    grouped: dict[int, list[Episode]] = {n: [] for n in scan_season_numbers(html)}
    for episode in scan_episodes(html, anime_id):
        grouped.setdefault(episode.season, []).append(episode)

    seasons: list[Season] = []
    for number in sorted(grouped):
        is_movies = number == MOVIES_SEASON
        slug = MOVIES_SLUG if is_movies else f"staffel-{number}"
        seasons.append(
            Season(
                season_number=number,
                title="Filme" if is_movies else f"Staffel {number}",
                is_movies=is_movies,
                link=f"{anime_path(anime_id)}/{slug}",
                episodes=grouped[number],
            )
        )
    return seasons


# ---------------------------------------------------------------------------
# stream links
# ---------------------------------------------------------------------------


def language_for(key: str) -> StreamLanguage:
    return LANGUAGES.get(key) or StreamLanguage("unknown", f"Language {key}")


def _li_hoster_name(content: str) -> str:
    name = first_group(r"<h4>([^<]+)</h4>", content, re.IGNORECASE)
    if name is None:
        name = first_group(r"<i[^>]*class=\"icon\s+([^\"]+)\"", content, re.IGNORECASE)
    return decode_html_entities(name).strip() if name else "Unknown"


def _scan_link_items(html: str, base_url: str) -> list[StreamSource]:
    sources: list[StreamSource] = []
    for m in _STREAM_LI_RE.finditer(html):
        _, lang_key, _, target, content = m.groups()
        sources.append(
            StreamSource(
                url=absolute_url(target, f"{base_url}/"),
                format=StreamFormat.REDIRECT,
                server=_li_hoster_name(content),
                language=language_for(lang_key),
            )
        )
    return sources


def _scan_named_targets(html: str, base_url: str) -> list[StreamSource]:
    sources: list[StreamSource] = []
    for server, needle in NAMED_HOSTER_TARGETS:
        pattern = rf"data-link-target=\"([^\"]*{needle}[^\"]*)\""
        for target in all_groups(pattern, html, re.IGNORECASE):
            sources.append(
                StreamSource(
                    url=absolute_url(target, f"{base_url}/"),
                    format=StreamFormat.EMBED,
                    server=server,
                )
            )
    for link_id in _REDIRECT_ID_RE.findall(html):
        sources.append(
            StreamSource(
                url=f"{base_url}/redirect/{link_id}",
                format=StreamFormat.REDIRECT,
                quality="Unknown",
                server="Redirect",
            )
        )
    return sources


def scan_stream_sources(html: str, base_url: str) -> list[StreamSource]:
    """Stream links of an episode page, distinct by URL, discovery order.

    The ``<li data-link-target>`` items are authoritative. The named-hoster
    and bare ``redirect/<id>`` scans only run when no item matched.
    ``is_default`` is left unset here.
    """
    found = _scan_link_items(html, base_url) or _scan_named_targets(html, base_url)
    seen: set[str] = set()
    distinct: list[StreamSource] = []
    for source in found:
        if source.url in seen:
            continue
        seen.add(source.url)
        distinct.append(source)
    return distinct


# ---------------------------------------------------------------------------
# detail page
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _YearRange:
    start: int | None
    end: int | None
    ongoing: bool


def _parse_year_range(html: str) -> _YearRange:
    start = first_group(_DATE_TEMPLATE.format(prop="startDate"), html, re.IGNORECASE)
    end = first_group(_DATE_TEMPLATE.format(prop="endDate"), html, re.IGNORECASE)
    start_year = int(start) if start and start.isdigit() else None
    end_year = int(end) if end and end.isdigit() else None
    return _YearRange(start_year, end_year, ongoing=end == _ONGOING_MARKER)


def parse_title(html: str) -> str | None:
    title = first_group(_TITLE_RE, html) or first_group(_FALLBACK_TITLE_RE, html)
    if title is None:
        return None
    return decode_html_entities(title).strip() or None


def parse_alt_titles(html: str) -> list[str]:
    raw = first_group(r"data-alternativetitles=\"([^\"]*)\"", html, re.IGNORECASE)
    if not raw:
        return []
    titles = (decode_html_entities(part).strip() for part in raw.split(","))
    return [t for t in titles if t]


def parse_description(html: str) -> str:
    text = first_group(r"data-full-description=\"([^\"]*)\"", html, re.IGNORECASE)
    if not text:
        text = first_group(
            r"<p[^>]*class=\"[^\"]*seri_des[^\"]*\"[^>]*>([^<]+)", html, re.IGNORECASE
        )
    return decode_html_entities(text or "").strip()


def parse_cover(html: str, base_url: str) -> str | None:
    m = _COVER_RE.search(html)
    if m is None:
        return None
    attrs = m.group(1)
    src = first_group(r"\sdata-src=\"([^\"]+)\"", attrs, re.IGNORECASE)
    if src is None:
        src = first_group(r"\ssrc=\"([^\"]+)\"", attrs, re.IGNORECASE)
    return absolute_url(src, f"{base_url}/") if src else None


def parse_banner(html: str, base_url: str) -> str | None:
    src = first_group(_BANNER_RE, html)
    return absolute_url(src, f"{base_url}/") if src else None


def parse_genres(html: str) -> list[str]:
    genres: list[str] = []
    for name in _GENRE_RE.findall(html):
        genre = decode_html_entities(name).strip()
        if genre and genre not in genres:
            genres.append(genre)
    return genres


def extract_cast_section(html: str, css_class: str, end_marker: str) -> list[str]:
    """Names inside the block that starts at ``class="<css_class>"``."""
    section = re.search(
        rf"class=\"{re.escape(css_class)}\"[^>]*>.*?{re.escape(end_marker)}",
        html,
        re.IGNORECASE | re.DOTALL,
    )
    if section is None:
        return []
    return [
        decode_html_entities(name).strip()
        for name in _CAST_NAME_RE.findall(section.group(0))
    ]


def _parse_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value.strip().replace(",", "."))
    except ValueError:
        return None


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    digits = re.sub(r"[^\d]", "", value)
    return int(digits) if digits else None


def parse_anime_details(html: str, anime_id: str, base_url: str) -> AnimeDetails:
    """Full detail record; missing fields stay at their defaults."""
    years = _parse_year_range(html)
    status = None
    if years.ongoing:
        status = "Ongoing"
    elif years.end is not None:
        status = "Completed"

    cast = {
        field_name: extract_cast_section(html, css_class, end_marker)
        for field_name, css_class, end_marker in CAST_SECTIONS
    }
    trailer = first_group(r"class=\"trailerButton\"[^>]*href=\"([^\"]+)\"", html, re.IGNORECASE)

    return AnimeDetails(
        id=anime_id,
        title=parse_title(html) or "Unknown",
        alt_titles=parse_alt_titles(html),
        cover=parse_cover(html, base_url),
        banner=parse_banner(html, base_url),
        description=parse_description(html),
        genres=parse_genres(html),
        status=status,
        start_year=years.start,
        end_year=years.end,
        fsk_rating=first_group(r"data-fsk=\"(\d+)\"", html, re.IGNORECASE),
        imdb_id=first_group(r"data-imdb=\"([^\"]+)\"", html, re.IGNORECASE),
        rating=_parse_float(
            first_group(r"itemprop=\"ratingValue\">([^<]+)</span>", html, re.IGNORECASE)
        ),
        rating_count=_parse_int(
            first_group(r"itemprop=\"ratingCount\">([^<]+)</span>", html, re.IGNORECASE)
        ),
        trailer_url=absolute_url(trailer, f"{base_url}/") if trailer else None,
        seasons=build_seasons(html, anime_id),
        **cast,
    )


def extract_anilist_search_title(html: str) -> str | None:
    """First title of ``<h1 itemprop="name" title="Animes Stream: A, B">``."""
    raw = first_group(_H1_TITLE_ATTR_RE, html)
    if raw is None:
        return None
    title = decode_html_entities(raw)
    if title.startswith(_ANILIST_TITLE_PREFIX):
        title = title[len(_ANILIST_TITLE_PREFIX):]
    first = title.split(",")[0].strip()
    return first or None
