"""Shared HTTP constants (user agents, timeouts)."""

from __future__ import annotations

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

# Luluvdo serves its embed only to mobile browsers.
MOBILE_FIREFOX_USER_AGENT = (
    "Mozilla/5.0 (Android 15; Mobile; rv:132.0) Gecko/132.0 Firefox/132.0"
)

DEFAULT_CLIENT_TIMEOUT = 15.0
