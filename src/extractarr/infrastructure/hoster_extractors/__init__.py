"""Hoster extractors - turn hoster pages into playable stream sources."""

from __future__ import annotations

from extractarr.domain.entities.hoster import HosterKey
from extractarr.domain.ports.http import HttpCapability

from .base import BaseStreamExtractor
from .doodstream import DoodstreamExtractor
from .filemoon import FilemoonExtractor
from .loadx import LoadXExtractor
from .luluvdo import LuluvdoExtractor
from .redirect import RedirectResolver, is_indirection
from .registry import HosterRegistry, hoster_info, identify, supported_hosters
from .speedfiles import SpeedFilesExtractor
from .streamtape import StreamtapeExtractor
from .vidmoly import VidmolyExtractor
from .vidoza import VidozaExtractor
from .voe import VoeExtractor

EXTRACTOR_TYPES: dict[HosterKey, type[BaseStreamExtractor]] = {
    HosterKey.VIDOZA: VidozaExtractor,
    HosterKey.VIDMOLY: VidmolyExtractor,
    HosterKey.VOE: VoeExtractor,
    HosterKey.STREAMTAPE: StreamtapeExtractor,
    HosterKey.SPEEDFILES: SpeedFilesExtractor,
    HosterKey.LULUVDO: LuluvdoExtractor,
    HosterKey.LOADX: LoadXExtractor,
    HosterKey.FILEMOON: FilemoonExtractor,
    HosterKey.DOODSTREAM: DoodstreamExtractor,
}


def create_registry(http: HttpCapability) -> HosterRegistry:
    """Registry with one extractor per hoster, all sharing ``http``."""
    return HosterRegistry({key: cls(http) for key, cls in EXTRACTOR_TYPES.items()})


__all__ = [
    "EXTRACTOR_TYPES",
    "BaseStreamExtractor",
    "DoodstreamExtractor",
    "FilemoonExtractor",
    "HosterRegistry",
    "LoadXExtractor",
    "LuluvdoExtractor",
    "RedirectResolver",
    "SpeedFilesExtractor",
    "StreamtapeExtractor",
    "VidmolyExtractor",
    "VidozaExtractor",
    "VoeExtractor",
    "create_registry",
    "hoster_info",
    "identify",
    "is_indirection",
    "supported_hosters",
]
