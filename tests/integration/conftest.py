"""Shared fixtures for integration tests.

These tests use the real facade wiring (HttpxCapability, CacheStore,
extractors, aniworld adapter) with mocked HTTP via respx.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest
import respx

from extractarr.application.provider_facade import ProviderFacade
from extractarr.infrastructure.config.schema import AppConfig
from extractarr.interfaces.composition import build_facade


@pytest.fixture()
def respx_mock() -> Iterator[respx.MockRouter]:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        environment="test",
        anilist_enabled=False,
        cache_dir=tmp_path / "cache",
    )


@pytest.fixture()
async def facade(
    app_config: AppConfig, respx_mock: respx.MockRouter
) -> AsyncIterator[ProviderFacade]:
    """Fully wired facade; every request goes through ``respx_mock``."""
    built = build_facade(app_config)
    try:
        yield built
    finally:
        await built.aclose()
