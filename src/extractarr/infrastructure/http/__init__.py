"""HTTP capability implementations."""

from .constants import DEFAULT_CLIENT_TIMEOUT, DEFAULT_USER_AGENT
from .httpx_adapter import HttpxCapability
from .response import raise_for_response

__all__ = [
    "DEFAULT_CLIENT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "HttpxCapability",
    "raise_for_response",
]
