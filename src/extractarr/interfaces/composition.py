"""Composition root: wires the facade from an ``AppConfig``."""

from __future__ import annotations

import structlog

from extractarr.application.provider_facade import CacheFamilies, ProviderFacade
from extractarr.domain.ports.storage import StoragePort
from extractarr.infrastructure.anilist import AniListClient
from extractarr.infrastructure.cache import create_storage
from extractarr.infrastructure.config.schema import AppConfig
from extractarr.infrastructure.hoster_extractors import (
    RedirectResolver,
    create_registry,
)
from extractarr.infrastructure.hoster_extractors.base import browser_headers
from extractarr.infrastructure.http import HttpxCapability
from extractarr.infrastructure.providers import AniworldProvider

log = structlog.get_logger(__name__)


def build_caches(config: AppConfig, storage: StoragePort) -> CacheFamilies:
    bounds = {
        family: (limits.max_size, float(limits.max_age_seconds))
        for family, limits in config.cache_families.items()
    }
    return CacheFamilies.create(storage, bounds)


def build_facade(config: AppConfig) -> ProviderFacade:
    """Build the facade and everything behind it.

    The facade owns the HTTP client and the storage; ``aclose()`` on it
    releases both.
    """
    http = HttpxCapability(
        timeout=config.http_timeout_seconds,
        user_agent=config.http_user_agent,
    )
    storage = create_storage(config.cache_backend, directory=config.cache_dir)

    anilist = None
    if config.anilist_enabled:
        anilist = AniListClient(http, url=config.anilist_url)
    provider = AniworldProvider(
        http,
        base_url=config.provider_base_url,
        default_policy=config.provider_default_policy,
        page_size=config.provider_page_size,
        anilist=anilist,
    )
    resolver = RedirectResolver(
        http, headers=browser_headers(referer=f"{provider.base_url}/")
    )

    async def _close() -> None:
        await http.aclose()
        close_storage = getattr(storage, "aclose", None)
        if close_storage is not None:
            await close_storage()
        log.debug("facade_closed")

    log.info(
        "facade_built",
        provider=provider.name,
        base_url=provider.base_url,
        cache_backend=config.cache_backend,
        anilist=config.anilist_enabled,
    )
    return ProviderFacade(
        provider,
        create_registry(http),
        resolver,
        build_caches(config, storage),
        on_close=_close,
    )
