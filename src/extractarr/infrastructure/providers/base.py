"""Shared base class for catalog-site adapters.

Holds the HTTP capability and base URL, and maps failed fetches and
malformed bodies onto the error taxonomy. Subclasses implement the
``MediaProviderPort`` methods.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from extractarr.domain.entities.http import HttpResponse
from extractarr.domain.exceptions import ParseError
from extractarr.domain.ports.http import HttpCapability
from extractarr.infrastructure.common.patterns import absolute_url
from extractarr.infrastructure.http.response import raise_for_response

from .policies import DefaultPolicy


class ProviderAdapterBase:
    """Subclasses **must** set ``name`` and ``default_base_url``."""

    name: str = ""
    default_base_url: str = ""

    def __init__(
        self,
        http: HttpCapability,
        *,
        base_url: str | None = None,
        default_policy: DefaultPolicy = "first",
    ) -> None:
        self._http = http
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.default_policy = default_policy
        self._log = structlog.get_logger(self.name or __name__)

    def _url(self, path: str) -> str:
        return absolute_url(path, f"{self.base_url}/")

    async def _fetch(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """GET ``url``; raise ``ConnectivityError``/``HttpStatusError`` on failure."""
        response = await self._http.get(url, headers=headers)
        if not response.ok:
            self._log.warning(
                f"{self.name}_fetch_failed",
                url=url,
                status=response.status,
                error=response.error,
            )
        return raise_for_response(response, context=self.base_url)

    def _parse_json(self, response: HttpResponse, message: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._log.warning(f"{self.name}_invalid_json", url=response.url)
            raise ParseError(message) from exc
