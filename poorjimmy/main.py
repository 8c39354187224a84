"""Application bootstrap for the Poor Jimmy Discord bot.

This module wires together configuration, logging, Lavalink connectivity, the
per-guild session services and dynamic extension loading so the bot can be
launched with ``python -m poorjimmy.main``. Side effects stay in the
``setup_hook`` lifecycle so the import is safe for testing.
"""

import logging
import os
import sys
from typing import Optional

import discord
from discord.ext import commands

from poorjimmy.configs.settings import CONFIG, DISCORD_TOKEN
from poorjimmy.services.disconnect_service import AutoDisconnectCoordinator
from poorjimmy.services.lavalink_service import LavalinkManager
from poorjimmy.services.queue_service import QueueService
from poorjimmy.services.session_service import SessionRegistry, VoiceSessionManager
from poorjimmy.services.track_service import TrackService
from poorjimmy.services.ytdlp_service import YtDlpService
from poorjimmy.utils.embeds import EmbedFactory
from poorjimmy.utils.logger import setup_logging

INTENTS = discord.Intents.default()
INTENTS.guilds = True
INTENTS.voice_states = True


class PoorJimmy(commands.AutoShardedBot):
    """Main bot implementation.

    Holds the session registry and the services that operate on it; cogs
    reach them through the bot instance.
    """

    def __init__(self):
        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=INTENTS,
            help_command=None,
            shard_count=CONFIG.bot.shard_count,
        )
        self.logger: Optional[logging.Logger] = None
        self.lavalink_manager = LavalinkManager(self, CONFIG.lavalink)
        self.sessions = SessionRegistry()
        self.voice = VoiceSessionManager(self, self.sessions)
        self.coordinator = AutoDisconnectCoordinator(
            self.sessions,
            delay=CONFIG.playback.auto_disconnect_seconds,
            leave=self.voice.leave,
            notify=self._announce_inactivity,
        )
        self.queue = QueueService(self.sessions, self.coordinator)
        self.ytdlp = YtDlpService(CONFIG.search)
        self.tracks = TrackService(self, self.queue, self.ytdlp)

    async def _announce_inactivity(self, guild_id: int, text_channel_id: Optional[int]) -> None:
        """Post the auto-disconnect notice to the session's text channel."""
        if not text_channel_id:
            return
        channel = self.get_channel(text_channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            return
        await channel.send(
            embed=EmbedFactory().success("Poor Jimmy **left** the voice channel due to inactivity!")
        )

    async def close(self):
        """Cancel pending disconnect timers and gracefully stop Lavalink."""
        if hasattr(self, "coordinator"):
            await self.coordinator.close()

        for vc in list(self.voice_clients):
            try:
                await vc.disconnect(force=True)
            except Exception as e:
                if self.logger:
                    self.logger.error("Error disconnecting voice client: %s", e)

        if hasattr(self, "lavalink_manager"):
            await self.lavalink_manager.close()

        await super().close()

    async def setup_hook(self):
        """Configure logging, initialise Lavalink and load extensions."""
        setup_logging()

        self.logger = logging.getLogger("PoorJimmy")
        self.logger.info("Initializing Poor Jimmy...")

        await self.lavalink_manager.connect()

        # Load all cogs dynamically
        for pkg in ("events", "commands"):
            folder = os.path.join(os.path.dirname(__file__), pkg)
            for file in sorted(os.listdir(folder)):
                if file.endswith(".py") and not file.startswith("__"):
                    ext = f"poorjimmy.{pkg}.{file[:-3]}"
                    await self.load_extension(ext)
                    self.logger.info("Loaded extension: %s", ext)

        if CONFIG.bot.sync_commands_on_start:
            synced = await self.tree.sync()
            self.logger.info("Slash commands synced (%s commands).", len(synced))


def main() -> int:
    if not DISCORD_TOKEN:
        setup_logging()
        logging.getLogger("PoorJimmy").error("DISCORD_TOKEN is not set; refusing to start.")
        return 1
    bot = PoorJimmy()
    bot.run(DISCORD_TOKEN, log_handler=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
