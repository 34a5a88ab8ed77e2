"""Tests for the extractarr command line entrypoint."""

from __future__ import annotations

import json
import sys
from typing import Any, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from extractarr.domain.entities.media import (
    AnimeSummary,
    HosterInfo,
    PaginatedResult,
    StreamFormat,
    StreamLanguage,
    StreamSource,
)
from extractarr.interfaces.cli import cli


@pytest.fixture()
def facade() -> MagicMock:
    mock = MagicMock()
    for name in (
        "search",
        "get_popular",
        "get_latest",
        "get_episodes",
        "get_anime_details",
        "get_streams",
        "extract_stream",
        "aclose",
    ):
        setattr(mock, name, AsyncMock())
    return mock


@pytest.fixture()
def patched_cli(monkeypatch: pytest.MonkeyPatch, facade: MagicMock) -> Iterator[MagicMock]:
    monkeypatch.setattr(cli, "build_facade", lambda config: facade)
    monkeypatch.setattr(cli, "configure_logging", lambda config: None)
    monkeypatch.setattr(cli, "stop_logging", lambda: None)
    # Keep structlog's default logger off stdout, which carries the CLI JSON.
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(sys.stderr))
    yield facade
    structlog.reset_defaults()


class TestParseArgs:
    def test_search_with_page(self) -> None:
        args = cli._parse_args(["search", "naruto", "--page", "2"])
        assert args.command == "search"
        assert args.query == "naruto"
        assert args.page == 2

    def test_global_flags(self) -> None:
        args = cli._parse_args(
            ["--log-level", "DEBUG", "--cache-backend", "diskcache", "streams", "naruto", "1-1"]
        )
        assert args.log_level == "DEBUG"
        assert args.cache_backend == "diskcache"
        assert (args.anime_id, args.episode_id) == ("naruto", "1-1")

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            cli._parse_args([])

    def test_invalid_backend_rejected(self) -> None:
        with pytest.raises(SystemExit):
            cli._parse_args(["--cache-backend", "redis", "hosters"])


class TestToJsonable:
    def test_nested_dataclasses(self) -> None:
        source = StreamSource(
            "https://aniworld.to/redirect/1",
            StreamFormat.REDIRECT,
            language=StreamLanguage("de", "German Dubbed"),
        )
        data = cli._to_jsonable([source])
        assert data[0]["url"] == "https://aniworld.to/redirect/1"
        assert data[0]["language"] == {"code": "de", "label": "German Dubbed"}
        assert json.loads(json.dumps(data))[0]["format"] == "redirect"

    def test_plain_values_untouched(self) -> None:
        assert cli._to_jsonable(None) is None
        assert cli._to_jsonable([{"key": "voe"}]) == [{"key": "voe"}]


class TestStart:
    def test_search_prints_envelope(
        self, patched_cli: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        patched_cli.search.return_value = PaginatedResult(
            results=[AnimeSummary(id="naruto", title="Naruto")], total_results=1
        )

        code = cli.start(["search", "naruto"])

        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["results"][0]["id"] == "naruto"
        assert out["error"] is None
        patched_cli.search.assert_awaited_once_with("naruto", 1)
        patched_cli.aclose.assert_awaited_once()

    def test_hoster_info(
        self, patched_cli: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        patched_cli.get_hoster_info.return_value = HosterInfo("VOE", True, "voe")
        assert cli.start(["hoster", "https://voe.sx/e/a"]) == 0
        assert json.loads(capsys.readouterr().out) == {
            "name": "VOE",
            "supported": True,
            "key": "voe",
        }

    def test_extract_miss_exits_one(
        self, patched_cli: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        patched_cli.extract_stream.return_value = None
        assert cli.start(["extract", "https://example.com/v"]) == 1
        assert capsys.readouterr().out.strip() == "null"

    def test_extract_hit(
        self, patched_cli: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        patched_cli.extract_stream.return_value = StreamSource(
            "https://cdn.example.com/master.m3u8", StreamFormat.M3U8
        )
        assert cli.start(["extract", "https://voe.sx/e/a"]) == 0
        assert json.loads(capsys.readouterr().out)["format"] == "m3u8"

    def test_streams_resolve_extracts_pointers(
        self, patched_cli: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        german = StreamLanguage("de", "German Dubbed")
        patched_cli.get_streams.return_value = [
            StreamSource(
                "https://aniworld.to/redirect/1",
                StreamFormat.REDIRECT,
                server="VOE",
                is_default=True,
                language=german,
            ),
            StreamSource("https://aniworld.to/redirect/2", StreamFormat.REDIRECT, server="Vidoza"),
            StreamSource("https://cdn.example.com/direct.mp4", StreamFormat.MP4),
        ]
        patched_cli.extract_stream.side_effect = [
            None,
            StreamSource("https://str.vidoza.net/v.mp4", StreamFormat.MP4, server="Vidoza"),
        ]

        assert cli.start(["streams", "naruto", "1-1", "--resolve"]) == 0

        out = json.loads(capsys.readouterr().out)
        assert [s["url"] for s in out] == [
            "https://str.vidoza.net/v.mp4",
            "https://cdn.example.com/direct.mp4",
        ]
        assert [s["is_default"] for s in out] == [True, False]
        assert [c.args[0] for c in patched_cli.extract_stream.await_args_list] == [
            "https://aniworld.to/redirect/1",
            "https://aniworld.to/redirect/2",
        ]

    def test_streams_without_resolve_skips_extraction(
        self, patched_cli: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        patched_cli.get_streams.return_value = [
            StreamSource("https://aniworld.to/redirect/1", StreamFormat.REDIRECT, is_default=True)
        ]
        assert cli.start(["streams", "naruto", "1-1"]) == 0
        assert json.loads(capsys.readouterr().out)[0]["format"] == "redirect"
        patched_cli.extract_stream.assert_not_awaited()

    def test_closes_facade_on_error(self, patched_cli: MagicMock) -> None:
        patched_cli.get_popular.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            cli.start(["popular"])
        patched_cli.aclose.assert_awaited_once()

    def test_cli_overrides_reach_config(
        self, monkeypatch: pytest.MonkeyPatch, patched_cli: MagicMock
    ) -> None:
        seen: dict[str, Any] = {}

        def _build(config: Any) -> MagicMock:
            seen["config"] = config
            return patched_cli

        monkeypatch.setattr(cli, "build_facade", _build)
        patched_cli.get_supported_hosters.return_value = []

        cli.start(["--log-format", "json", "--cache-backend", "diskcache", "hosters"])

        assert seen["config"].log_format == "json"
        assert seen["config"].cache_backend == "diskcache"
