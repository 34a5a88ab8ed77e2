"""Catalog-site adapters implementing ``MediaProviderPort``."""

from .aniworld import AniworldProvider
from .base import ProviderAdapterBase
from .policies import DefaultPolicy, mark_default, quality_score

__all__ = [
    "AniworldProvider",
    "DefaultPolicy",
    "ProviderAdapterBase",
    "mark_default",
    "quality_score",
]
