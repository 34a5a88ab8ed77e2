"""Closed set of supported video hosters."""

from __future__ import annotations

from enum import Enum


class HosterKey(str, Enum):
    VIDOZA = "vidoza"
    VIDMOLY = "vidmoly"
    VOE = "voe"
    STREAMTAPE = "streamtape"
    SPEEDFILES = "speedfiles"
    LULUVDO = "luluvdo"
    LOADX = "loadx"
    FILEMOON = "filemoon"
    DOODSTREAM = "doodstream"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[HosterKey, str] = {
    HosterKey.VIDOZA: "Vidoza",
    HosterKey.VIDMOLY: "Vidmoly",
    HosterKey.VOE: "VOE",
    HosterKey.STREAMTAPE: "Streamtape",
    HosterKey.SPEEDFILES: "SpeedFiles",
    HosterKey.LULUVDO: "Luluvdo",
    HosterKey.LOADX: "LoadX",
    HosterKey.FILEMOON: "Filemoon",
    HosterKey.DOODSTREAM: "Doodstream",
}
