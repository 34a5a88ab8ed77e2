"""Mapping of HTTP capability responses onto the error taxonomy."""

from __future__ import annotations

from extractarr.domain.entities.http import HttpResponse
from extractarr.domain.exceptions import ConnectivityError, HttpStatusError


def raise_for_response(response: HttpResponse, context: str = "") -> HttpResponse:
    """Return ``response`` unchanged if it is a 2xx, raise otherwise.

    Raises:
        ConnectivityError: status 0 (transport failure).
        HttpStatusError: any other non-2xx status.
    """
    if response.ok:
        return response
    if response.is_connectivity_failure:
        target = context or response.url or "upstream"
        raise ConnectivityError(
            f"Network error: {response.error or f'Unable to connect to {target}'}"
        )
    raise HttpStatusError(response.status, response.status_text, url=response.url)
