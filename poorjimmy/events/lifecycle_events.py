"""Lifecycle hooks for updating presence once the bot is ready."""

import logging

import discord
from discord.ext import commands

from poorjimmy.configs.settings import CONFIG

logger = logging.getLogger(__name__)


class LifecycleEvents(commands.Cog):
    """Handles the ready event."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.Cog.listener()
    async def on_ready(self):
        """Set the "Listening to /play" presence on every shard."""
        logger.info("%s is connected!", self.bot.user)
        activity = discord.Activity(type=discord.ActivityType.listening, name=CONFIG.bot.presence_text)
        await self.bot.change_presence(status=discord.Status.online, activity=activity)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(LifecycleEvents(bot))
