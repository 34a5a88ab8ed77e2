"""HTTP response value object exchanged across the HTTP capability port."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class HttpResponse:
    """Outcome of a single request.

    ``status == 0`` marks a transport failure (DNS, TLS, timeout, refused
    connection); ``error`` then carries the reason.
    """

    ok: bool
    status: int
    body: str = ""
    url: str = ""
    status_text: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    error: str | None = None

    @property
    def is_connectivity_failure(self) -> bool:
        return self.status == 0

    def json(self) -> Any:
        """Decode the body as JSON (raises ``ValueError`` on bad input)."""
        return json.loads(self.body)

    @classmethod
    def transport_failure(cls, url: str, error: str) -> HttpResponse:
        return cls(ok=False, status=0, url=url, error=error)
