"""Resolve URLs and titles to Lavalink tracks and hand them to the queue."""

from __future__ import annotations

import logging
from typing import Any, Optional

from poorjimmy.services.queue_service import QueueOutcome, QueueService, QueueStatus, no_session_outcome
from poorjimmy.services.ytdlp_service import YtDlpService
from poorjimmy.utils.exceptions import YtDlpError
from poorjimmy.utils.tracks import TrackMetadata, metadata_from_track

logger = logging.getLogger(__name__)

SEARCH_FAILED = "Failed to search YouTube. Please try again later."


class TrackService:
    """Glue between the command surface, Lavalink track loading and yt-dlp."""

    def __init__(self, bot: Any, queue: QueueService, ytdlp: YtDlpService):
        self.bot = bot
        self.queue = queue
        self.ytdlp = ytdlp

    async def load(self, url: str) -> Optional[Any]:
        """Return the first track Lavalink resolves for ``url``, if any."""
        client = getattr(self.bot, "lavalink", None)
        if client is None:
            return None
        try:
            result = await client.get_tracks(url)
        except Exception as exc:
            logger.error("Lavalink failed to load '%s': %s", url, exc)
            return None
        error = getattr(result, "error", None)
        if error:
            logger.error("Lavalink could not load '%s': %s", url, getattr(error, "message", error))
        tracks = result.tracks if result else []
        return tracks[0] if tracks else None

    async def play_url(
        self,
        guild_id: Optional[int],
        url: str,
        *,
        metadata: Optional[TrackMetadata] = None,
        requester: Optional[int] = None,
    ) -> QueueOutcome:
        """Load ``url`` and enqueue it; ``metadata`` overrides what Lavalink reports."""
        if self.queue.registry.get(guild_id) is None:
            return no_session_outcome("playing song")

        track = await self.load(url)
        if track is None:
            return QueueOutcome(QueueStatus.NOT_FOUND, f"Could not load a track from {url}", is_error=True)
        return await self.queue.enqueue(
            guild_id, track, metadata or metadata_from_track(track), requester=requester
        )

    async def play_title(
        self,
        guild_id: Optional[int],
        title: str,
        *,
        requester: Optional[int] = None,
    ) -> QueueOutcome:
        """Enqueue the best YouTube match for ``title``."""
        if self.queue.registry.get(guild_id) is None:
            return no_session_outcome("playing song")

        try:
            result = await self.ytdlp.first(title)
        except YtDlpError as exc:
            logger.error("yt-dlp search for '%s' failed: %s", title, exc)
            return QueueOutcome(QueueStatus.FAILED, SEARCH_FAILED, is_error=True)
        if result is None:
            return QueueOutcome(QueueStatus.NOT_FOUND, f'No results found for "{title}"', is_error=True)

        metadata = TrackMetadata(
            title=result.title,
            thumbnail_url=result.thumbnail_url,
            duration=int(result.duration) if result.duration else None,
        )
        return await self.play_url(guild_id, result.url, metadata=metadata, requester=requester)
