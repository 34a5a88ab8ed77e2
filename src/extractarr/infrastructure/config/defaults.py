"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

from extractarr.infrastructure.http.constants import (
    DEFAULT_CLIENT_TIMEOUT,
    DEFAULT_USER_AGENT,
)

# Per operation family: (max entries, max age in seconds).
DEFAULT_CACHE_FAMILIES: dict[str, dict[str, int]] = {
    "search": {"max_size": 50, "max_age_seconds": 2 * 3600},
    "popular": {"max_size": 20, "max_age_seconds": 4 * 3600},
    "latest": {"max_size": 20, "max_age_seconds": 3600},
    "episodes": {"max_size": 50, "max_age_seconds": 3600},
    "streams": {"max_size": 100, "max_age_seconds": 600},
    "details": {"max_size": 50, "max_age_seconds": 3600},
    "extract": {"max_size": 200, "max_age_seconds": 600},
}

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "extractarr",
    "environment": "dev",
    "http": {
        "timeout_seconds": DEFAULT_CLIENT_TIMEOUT,
        "user_agent": DEFAULT_USER_AGENT,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "backend": "memory",
        "dir": "./.cache/extractarr",
        "families": DEFAULT_CACHE_FAMILIES,
    },
    "provider": {
        "base_url": "https://aniworld.to",
        "page_size": 24,
        "default_policy": "first",
    },
    "anilist": {
        "enabled": True,
        "url": "https://graphql.anilist.co",
    },
}
