"""httpx-backed implementation of the HTTP capability port.

Transport failures never escape: they are logged and reported as a
``status == 0`` response so that callers can tell them apart from
upstream HTTP errors.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx
import structlog

from extractarr.domain.entities.http import HttpResponse

from .constants import DEFAULT_CLIENT_TIMEOUT, DEFAULT_USER_AGENT

log = structlog.get_logger(__name__)


def _to_response(resp: httpx.Response, *, with_body: bool = True) -> HttpResponse:
    return HttpResponse(
        ok=resp.is_success,
        status=resp.status_code,
        body=resp.text if with_body else "",
        url=str(resp.url),
        status_text=resp.reason_phrase,
        headers=dict(resp.headers),
    )


class HttpxCapability:
    """Wraps one shared ``httpx.AsyncClient``.

    A client passed in by the caller is not closed by ``aclose()``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_CLIENT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._user_agent = user_agent

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"User-Agent": self._user_agent},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None,
        follow_redirects: bool,
        **kwargs: Any,
    ) -> HttpResponse:
        client = self._ensure_client()
        try:
            resp = await client.request(
                method,
                url,
                headers=dict(headers) if headers else None,
                follow_redirects=follow_redirects,
                **kwargs,
            )
        except httpx.TimeoutException as exc:
            log.warning("http_timeout", method=method, url=url)
            reason = f"Timeout: {exc}" if str(exc) else "Timeout"
            return HttpResponse.transport_failure(url, reason)
        except httpx.HTTPError as exc:
            log.warning(
                "http_transport_error",
                method=method,
                url=url,
                error=str(exc) or type(exc).__name__,
            )
            return HttpResponse.transport_failure(url, str(exc) or type(exc).__name__)
        except httpx.InvalidURL as exc:
            log.warning("http_invalid_url", method=method, url=repr(url), error=str(exc))
            return HttpResponse.transport_failure(url, f"Invalid URL: {exc}")

        if not resp.is_success:
            log.debug("http_status", method=method, url=url, status=resp.status_code)
        return _to_response(resp, with_body=method != "HEAD")

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
    ) -> HttpResponse:
        return await self._request(
            "GET", url, headers=headers, follow_redirects=follow_redirects
        )

    async def post(
        self,
        url: str,
        *,
        data: Mapping[str, Any] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
    ) -> HttpResponse:
        kwargs: dict[str, Any] = {}
        if data is not None:
            kwargs["data"] = dict(data)
        if json is not None:
            kwargs["json"] = json
        return await self._request(
            "POST", url, headers=headers, follow_redirects=follow_redirects, **kwargs
        )

    async def head(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
    ) -> HttpResponse:
        return await self._request(
            "HEAD", url, headers=headers, follow_redirects=follow_redirects
        )
