"""Helpers for working with Lavalink track metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

METADATA_KEY = "metadata"
UNKNOWN_TITLE = "Unknown Track Title"


@dataclass(frozen=True)
class TrackMetadata:
    """Display data attached to a track when it is enqueued.

    ``duration`` is in seconds and ``None`` for live streams or when the
    source did not report one.
    """

    title: str
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = None


def metadata_from_track(track: Any) -> TrackMetadata:
    """Build metadata from the fields Lavalink reports for ``track``."""
    title = getattr(track, "title", None) or UNKNOWN_TITLE
    thumbnail = getattr(track, "artwork_url", None) or None
    duration_ms = getattr(track, "duration", None)
    is_stream = bool(getattr(track, "stream", False))
    duration = None
    if isinstance(duration_ms, (int, float)) and duration_ms > 0 and not is_stream:
        duration = int(duration_ms // 1000)
    return TrackMetadata(title=title, thumbnail_url=thumbnail, duration=duration)


def attach_metadata(track: Any, metadata: TrackMetadata) -> None:
    """Store ``metadata`` on the track's extra payload."""
    extra = getattr(track, "extra", None)
    if extra is None:
        extra = {}
        track.extra = extra
    extra[METADATA_KEY] = metadata


def track_metadata(track: Any) -> TrackMetadata:
    """Return the metadata attached at enqueue time, or derive it from the track."""
    extra = getattr(track, "extra", None)
    if isinstance(extra, dict):
        stored = extra.get(METADATA_KEY)
        if isinstance(stored, TrackMetadata):
            return stored
    return metadata_from_track(track)
