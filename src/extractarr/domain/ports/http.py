"""Port for the HTTP capability supplied by the host runtime."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from extractarr.domain.entities.http import HttpResponse


@runtime_checkable
class HttpCapability(Protocol):
    """Issues requests and reports the outcome as a value.

    Implementations MUST NOT raise for transport failures; they return an
    ``HttpResponse`` with ``status == 0`` instead. Timeouts are the
    implementation's responsibility.
    """

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
    ) -> HttpResponse: ...

    async def post(
        self,
        url: str,
        *,
        data: Mapping[str, Any] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
    ) -> HttpResponse: ...

    async def head(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
    ) -> HttpResponse: ...
