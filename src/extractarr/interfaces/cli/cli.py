from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path
from typing import Any

import structlog

from extractarr.application.provider_facade import ProviderFacade
from extractarr.domain.entities.media import StreamSource
from extractarr.infrastructure.config import load_config
from extractarr.infrastructure.logging.setup import configure_logging, stop_logging
from extractarr.interfaces.composition import build_facade

log = structlog.get_logger(__name__)


def _add_page(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--page", type=int, default=1, help="1-based page number.")


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="extractarr")

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )
    parser.add_argument(
        "--cache-backend",
        default=None,
        choices=["memory", "diskcache"],
        help="Override cache storage backend.",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Search the catalog.")
    search.add_argument("query")
    _add_page(search)

    _add_page(commands.add_parser("popular", help="List popular anime."))
    _add_page(commands.add_parser("latest", help="List newly added anime."))

    episodes = commands.add_parser("episodes", help="List episodes of an anime.")
    episodes.add_argument("anime_id")
    _add_page(episodes)

    details = commands.add_parser("details", help="Show anime details.")
    details.add_argument("anime_id")

    streams = commands.add_parser("streams", help="List stream links of an episode.")
    streams.add_argument("anime_id")
    streams.add_argument("episode_id", help="'<season>-<episode>' or 'filme-<n>'.")
    streams.add_argument(
        "--resolve",
        action="store_true",
        help="Run embed/redirect links through the extractor; drop the ones that fail.",
    )

    extract = commands.add_parser("extract", help="Resolve a hoster URL to a stream.")
    extract.add_argument("url")

    hoster = commands.add_parser("hoster", help="Identify the hoster of a URL.")
    hoster.add_argument("url")

    commands.add_parser("hosters", help="List supported hosters.")

    return parser.parse_args(argv)


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


async def _resolve_sources(
    facade: ProviderFacade, sources: list[StreamSource]
) -> list[StreamSource]:
    resolved: list[StreamSource] = []
    for source in sources:
        if source.needs_extraction:
            extracted = await facade.extract_stream(source.url)
            if extracted is None:
                log.info("stream_unresolved", url=source.url, server=source.server)
                continue
            source = replace(
                extracted, language=source.language, is_default=source.is_default
            )
        resolved.append(source)
    if resolved and not any(s.is_default for s in resolved):
        resolved[0] = resolved[0].as_default()
    return resolved


async def _dispatch(facade: ProviderFacade, args: argparse.Namespace) -> Any:
    command = args.command
    if command == "search":
        return await facade.search(args.query, args.page)
    if command == "popular":
        return await facade.get_popular(args.page)
    if command == "latest":
        return await facade.get_latest(args.page)
    if command == "episodes":
        return await facade.get_episodes(args.anime_id, args.page)
    if command == "details":
        return await facade.get_anime_details(args.anime_id)
    if command == "streams":
        sources = await facade.get_streams(args.anime_id, args.episode_id)
        if args.resolve:
            return await _resolve_sources(facade, sources)
        return sources
    if command == "extract":
        return await facade.extract_stream(args.url)
    if command == "hoster":
        return facade.get_hoster_info(args.url)
    if command == "hosters":
        return facade.get_supported_hosters()
    raise ValueError(f"Unknown command: {command}")


async def _run(facade: ProviderFacade, args: argparse.Namespace) -> Any:
    try:
        return await _dispatch(facade, args)
    finally:
        await facade.aclose()


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config once, runs one facade call and prints its result as JSON
    on stdout. Logs go to stderr.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config_path = Path(args.config) if args.config else None
    dotenv_path = Path(args.dotenv) if args.dotenv else None

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format
    if args.cache_backend:
        cli_overrides["cache_backend"] = args.cache_backend

    config = load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        cli_overrides=cli_overrides,
    )

    configure_logging(config)
    try:
        result = asyncio.run(_run(build_facade(config), args))
    finally:
        stop_logging()

    json.dump(_to_jsonable(result), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    # extract: exit status 1 when nothing playable was found
    return 1 if args.command == "extract" and result is None else 0


if __name__ == "__main__":
    raise SystemExit(start())
