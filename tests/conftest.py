"""Shared test fixtures for the extractarr test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from extractarr.domain.entities.http import HttpResponse
from extractarr.infrastructure.cache.memory_storage import MemoryStorage

# ---------------------------------------------------------------------------
# HTTP capability double
# ---------------------------------------------------------------------------


def make_response(
    body: str = "",
    *,
    status: int = 200,
    url: str = "https://example.com/",
    status_text: str = "",
    error: str | None = None,
) -> HttpResponse:
    return HttpResponse(
        ok=200 <= status < 300,
        status=status,
        body=body,
        url=url,
        status_text=status_text,
        error=error,
    )


class FakeHttp:
    """HttpCapability routed by (method, url); records every call.

    Unrouted URLs answer 404. A route registered several times answers
    in registration order and then keeps repeating the last response.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[HttpResponse]] = {}
        self.calls: list[dict[str, Any]] = []

    def add(
        self,
        url: str,
        body: str = "",
        *,
        method: str = "GET",
        status: int = 200,
        status_text: str = "",
        final_url: str | None = None,
        error: str | None = None,
    ) -> None:
        response = make_response(
            body,
            status=status,
            url=final_url or url,
            status_text=status_text,
            error=error,
        )
        self.routes.setdefault((method, url), []).append(response)

    def fail(
        self, url: str, error: str = "Connection refused", *, method: str = "GET"
    ) -> None:
        self.routes.setdefault((method, url), []).append(
            HttpResponse.transport_failure(url, error)
        )

    def calls_to(self, url: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["url"] == url]

    def _answer(self, method: str, url: str, **kwargs: Any) -> HttpResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        queue = self.routes.get((method, url))
        if not queue:
            return make_response(status=404, url=url, status_text="Not Found")
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    async def get(
        self, url: str, *, headers: Any = None, follow_redirects: bool = True
    ) -> HttpResponse:
        return self._answer("GET", url, headers=dict(headers or {}))

    async def post(
        self,
        url: str,
        *,
        data: Any = None,
        json: Any = None,
        headers: Any = None,
        follow_redirects: bool = True,
    ) -> HttpResponse:
        return self._answer(
            "POST", url, headers=dict(headers or {}), data=data, json=json
        )

    async def head(
        self, url: str, *, headers: Any = None, follow_redirects: bool = True
    ) -> HttpResponse:
        return self._answer("HEAD", url, headers=dict(headers or {}))


@pytest.fixture()
def fake_http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture()
def response_factory() -> Any:
    return make_response


@pytest.fixture()
def mock_http() -> AsyncMock:
    """Bare AsyncMock HttpCapability (assert on call counts)."""
    http = AsyncMock()
    http.get = AsyncMock(return_value=make_response())
    http.post = AsyncMock(return_value=make_response())
    http.head = AsyncMock(return_value=make_response())
    return http


# ---------------------------------------------------------------------------
# Storage / clock fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
