"""Centralised helpers for building themed Discord embeds."""

from typing import Optional

import discord

from poorjimmy.configs.settings import CONFIG
from poorjimmy.services.queue_service import QueueOutcome, QueueStatus
from poorjimmy.utils.formatting import format_search_duration, watch_url


class EmbedFactory:
    """Embed factory applying the configured colours and footer."""

    def __init__(self):
        self.theme = CONFIG.theme

    def _base(self, description: Optional[str], color: int, title: Optional[str] = None) -> discord.Embed:
        """Return a themed embed with the common footer decoration."""
        e = discord.Embed(title=title, description=description, color=color)
        if self.theme.footer_text:
            e.set_footer(text=self.theme.footer_text, icon_url=self.theme.footer_icon_url or None)
        return e

    # Generic
    def success(self, description: str) -> discord.Embed:
        return self._base(description, self.theme.color_success)

    def error(self, description: str) -> discord.Embed:
        return self._base(description, self.theme.color_error)

    def info(self, description: str, title: Optional[str] = None) -> discord.Embed:
        return self._base(description, self.theme.color_info, title)

    def outcome(self, outcome: QueueOutcome) -> discord.Embed:
        """Render a queue operation outcome, red when it is an error."""
        if outcome.is_error:
            return self.error(outcome.message)
        e = self.success(outcome.message)
        metadata = outcome.metadata
        if outcome.status is QueueStatus.PLAYING and metadata and metadata.thumbnail_url:
            e.set_image(url=metadata.thumbnail_url)
        return e

    # Rich cards
    def now_playing(self, title: str, thumbnail: Optional[str] = None) -> discord.Embed:
        e = self.success(f"**Now playing:** {title}")
        if thumbnail:
            e.set_image(url=thumbnail)
        return e

    def search_result(
        self,
        *,
        index: int,
        title: str,
        video_id: str,
        duration: Optional[float] = None,
        thumbnail: Optional[str] = None,
    ) -> discord.Embed:
        e = self._base(f"Duration: {format_search_duration(duration)}", self.theme.color_info, f"{index}. {title}")
        e.url = watch_url(video_id)
        if thumbnail:
            e.set_thumbnail(url=thumbnail)
        return e
