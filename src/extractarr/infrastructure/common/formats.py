"""Stream format inference from URL shape."""

from __future__ import annotations

from extractarr.domain.entities.media import StreamFormat


def infer_format(url: str) -> StreamFormat:
    """Classify a playable URL; unknown extensions default to mp4."""
    lowered = url.lower()
    if lowered.startswith("magnet:"):
        return StreamFormat.TORRENT
    if ".m3u8" in lowered or "/hls/" in lowered:
        return StreamFormat.M3U8
    if ".mpd" in lowered or "/dash/" in lowered:
        return StreamFormat.DASH
    if ".mkv" in lowered:
        return StreamFormat.MKV
    if ".webm" in lowered:
        return StreamFormat.WEBM
    return StreamFormat.MP4
