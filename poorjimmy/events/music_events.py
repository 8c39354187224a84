"""Music related event listeners used to broadcast playback updates."""

from __future__ import annotations

import logging
from typing import Any, Optional

import discord
import lavalink
from discord.ext import commands
from lavalink.events import QueueEndEvent, TrackEndEvent, TrackStartEvent

from poorjimmy.configs.settings import CONFIG
from poorjimmy.services.lavalink_service import JimmyPlayer
from poorjimmy.ui.buttons import music_buttons
from poorjimmy.utils.embeds import EmbedFactory
from poorjimmy.utils.tracks import track_metadata

logger = logging.getLogger(__name__)


def _reason_name(reason: Any) -> str:
    """TrackEndEvent reasons are an enum on newer clients and a string on older ones."""
    return str(getattr(reason, "name", reason)).upper()


class MusicEvents(commands.Cog):
    """React to Lavalink events: announce tracks, end of queue and arm auto-disconnect."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        if hasattr(bot, "lavalink"):
            bot.lavalink.add_event_hooks(self)

    @property
    def coordinator(self):
        return getattr(self.bot, "coordinator", None)

    @property
    def sessions(self):
        return getattr(self.bot, "sessions", None)

    def _channel(self, player: JimmyPlayer) -> Optional[discord.abc.Messageable]:
        """Find the text channel where ``player`` posts notifications."""
        channel_id = getattr(player, "text_channel_id", None)
        if not channel_id:
            return None
        guild = self.bot.get_guild(player.guild_id)
        if not guild:
            return None
        channel = guild.get_channel(channel_id)
        if isinstance(channel, discord.abc.Messageable):
            return channel
        return None

    @lavalink.listener()
    async def on_track_start(self, event: TrackStartEvent):
        """Announce the track that just became playable and disarm auto-disconnect."""
        if not isinstance(event, TrackStartEvent) or not getattr(event, "player", None):
            return

        player: JimmyPlayer = event.player  # type: ignore[assignment]
        if self.coordinator:
            self.coordinator.cancel(player.guild_id)

        metadata = track_metadata(event.track)
        logger.info("Now playing: '%s' in guild %s", metadata.title, player.guild_id)
        if not CONFIG.playback.announce_now_playing:
            return

        channel = self._channel(player)
        if not channel:
            return
        embed = EmbedFactory().now_playing(metadata.title, metadata.thumbnail_url)
        try:
            await channel.send(embed=embed, view=music_buttons())
        except Exception as exc:
            logger.error("Failed to send now playing message to channel %s: %s", player.text_channel_id, exc)

    @lavalink.listener()
    async def on_queue_end(self, event: QueueEndEvent):
        """Tell the channel the queue ran dry and start the inactivity countdown."""
        if not isinstance(event, QueueEndEvent) or not getattr(event, "player", None):
            return

        player: JimmyPlayer = event.player  # type: ignore[assignment]
        sessions = self.sessions
        if self.coordinator and sessions is not None and player.guild_id in sessions:
            self.coordinator.arm(player.guild_id)

        channel = self._channel(player)
        if not channel:
            return
        try:
            await channel.send(embed=EmbedFactory().success("Queue has **ended!**"))
        except Exception as exc:
            logger.error("Failed to send queue finished message: %s", exc)

    @lavalink.listener()
    async def on_track_end(self, event: TrackEndEvent):
        """Report load failures so users understand why playback stopped."""
        if not isinstance(event, TrackEndEvent) or not getattr(event, "player", None):
            return
        if _reason_name(event.reason) != "LOAD_FAILED":
            return

        player: JimmyPlayer = event.player  # type: ignore[assignment]
        logger.error("Track failed to load in guild %s", player.guild_id)
        channel = self._channel(player)
        if not channel:
            return
        try:
            await channel.send(embed=EmbedFactory().error("Failed to play track. The source might be unavailable."))
        except Exception as exc:
            logger.error("Failed to send load failure message: %s", exc)

    @commands.Cog.listener()
    async def on_voice_state_update(
        self, member: discord.Member, before: discord.VoiceState, after: discord.VoiceState
    ):
        """Drop the session when the bot is disconnected by someone else."""
        if self.bot.user is None or member.id != self.bot.user.id:
            return
        if before.channel is None or after.channel is not None:
            return

        guild_id = member.guild.id
        sessions = self.sessions
        if sessions is None or sessions.remove(guild_id) is None:
            return
        if self.coordinator:
            self.coordinator.forget(guild_id)
        logger.info("Removed from voice in guild %s; session dropped", guild_id)


async def setup(bot: commands.Bot) -> None:
    """Register the cog with the bot."""
    await bot.add_cog(MusicEvents(bot))
