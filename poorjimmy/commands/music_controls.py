from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from poorjimmy.configs.settings import CONFIG
from poorjimmy.services.queue_service import JOIN_HINT, QueueOutcome
from poorjimmy.services.track_service import SEARCH_FAILED
from poorjimmy.ui.buttons import music_buttons, search_buttons
from poorjimmy.utils.embeds import EmbedFactory
from poorjimmy.utils.exceptions import UserFacingError, YtDlpError
from poorjimmy.utils.formatting import is_valid_youtube_url, progress_bar

logger = logging.getLogger(__name__)


class MusicControls(commands.Cog):
    """Slash commands for starting and steering playback."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    # ------------------------------------------------------------------ helpers
    @property
    def queue(self):
        return self.bot.queue  # type: ignore[attr-defined]

    @staticmethod
    def _require_guild(inter: discord.Interaction) -> int:
        if inter.guild_id is None:
            raise UserFacingError("This command can only be used in a server!")
        return inter.guild_id

    @staticmethod
    async def _send_outcome(inter: discord.Interaction, outcome: QueueOutcome, *, buttons: bool = False):
        """Reply with ``outcome``; successful plays get the music controls."""
        embed = EmbedFactory().outcome(outcome)
        send = inter.followup.send if inter.response.is_done() else inter.response.send_message
        if buttons and not outcome.is_error:
            await send(embed=embed, view=music_buttons())
        else:
            await send(embed=embed)

    # ------------------------------------------------------------------ play
    @app_commands.command(name="play-url", description="Play the audio from a YouTube URL")
    @app_commands.describe(url="YouTube video link")
    async def play_url(self, inter: discord.Interaction, url: str):
        """Enqueue a YouTube link."""
        guild_id = self._require_guild(inter)
        url = url.strip()
        if not url:
            raise UserFacingError("Please provide a URL to play!")
        if not is_valid_youtube_url(url):
            raise UserFacingError("Please provide a valid YouTube URL!")

        await inter.response.defer()
        logger.info("Playing URL %s in guild %s", url, guild_id)
        outcome = await self.bot.tracks.play_url(guild_id, url, requester=inter.user.id)  # type: ignore[attr-defined]
        await self._send_outcome(inter, outcome, buttons=True)

    @app_commands.command(name="play-title", description="Play the audio from a Youtube video searching by title")
    @app_commands.describe(title="Video title to search for")
    async def play_title(self, inter: discord.Interaction, title: str):
        """Enqueue the first YouTube match for a title."""
        guild_id = self._require_guild(inter)
        title = title.strip()
        if not title:
            raise UserFacingError("Please provide a title to search!")

        await inter.response.defer()
        logger.info("Playing title '%s' in guild %s", title, guild_id)
        outcome = await self.bot.tracks.play_title(guild_id, title, requester=inter.user.id)  # type: ignore[attr-defined]
        await self._send_outcome(inter, outcome, buttons=True)

    @app_commands.command(name="search", description="Search YouTube and choose a video's audio to play")
    @app_commands.describe(query="What to search YouTube for")
    async def search(self, inter: discord.Interaction, query: str):
        """Post up to five results, each selectable with an ``Option`` button."""
        self._require_guild(inter)
        query = query.strip()
        if not query:
            raise UserFacingError("Please provide a search query!")

        factory = EmbedFactory()
        await inter.response.defer()
        try:
            results = await self.bot.ytdlp.search(query)  # type: ignore[attr-defined]
        except YtDlpError as exc:
            logger.error("yt-dlp command failed: %s", exc)
            return await inter.followup.send(embed=factory.error(SEARCH_FAILED))

        if not results:
            return await inter.followup.send(embed=factory.error(f'No results found for "{query}"'))

        embeds = [
            factory.search_result(
                index=index,
                title=result.title,
                video_id=result.id,
                duration=result.duration,
                thumbnail=result.thumbnail_url,
            )
            for index, result in enumerate(results, start=1)
        ]
        try:
            await inter.followup.send(embeds=embeds, view=search_buttons([result.id for result in results]))
        except discord.HTTPException as exc:
            logger.error("Failed to send search results: %s", exc)

    # ------------------------------------------------------------------ transport
    @app_commands.command(name="pause", description="Pause the current song")
    async def pause(self, inter: discord.Interaction):
        outcome = await self.queue.pause(self._require_guild(inter))
        await self._send_outcome(inter, outcome)

    @app_commands.command(name="resume", description="Resume the current song")
    async def resume(self, inter: discord.Interaction):
        outcome = await self.queue.resume(self._require_guild(inter))
        await self._send_outcome(inter, outcome)

    @app_commands.command(name="skip", description="Skip the current song")
    async def skip(self, inter: discord.Interaction):
        outcome = await self.queue.skip(self._require_guild(inter))
        await self._send_outcome(inter, outcome)

    @app_commands.command(name="loop", description="Enable/disable looping for the current song")
    async def loop(self, inter: discord.Interaction):
        outcome = await self.queue.toggle_loop(self._require_guild(inter))
        await self._send_outcome(inter, outcome)

    @app_commands.command(name="clear", description="Stop the current song and clear the queue")
    async def clear(self, inter: discord.Interaction):
        outcome = await self.queue.clear(self._require_guild(inter))
        await self._send_outcome(inter, outcome)

    @app_commands.command(name="now-playing", description="Show the currently playing song with progress")
    async def now_playing(self, inter: discord.Interaction):
        """Title, artwork and a progress bar for the current track."""
        factory = EmbedFactory()
        snapshot = await self.queue.snapshot(self._require_guild(inter))
        if snapshot is None:
            return await inter.response.send_message(embed=factory.error(f"Error! {JOIN_HINT}"))
        if snapshot.current is None:
            return await inter.response.send_message(embed=factory.success("No song is currently playing!"))

        current = snapshot.current
        bar = progress_bar(snapshot.position, current.duration, CONFIG.playback.progress_bar_length)
        embed = factory.success(f"**Now Playing:**\n{current.title}\n\n{bar}")
        if current.thumbnail_url:
            embed.set_image(url=current.thumbnail_url)
        await inter.response.send_message(embed=embed, view=music_buttons())


async def setup(bot: commands.Bot):
    await bot.add_cog(MusicControls(bot))
