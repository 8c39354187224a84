"""Small informational slash commands."""

from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from poorjimmy.utils.embeds import EmbedFactory
from poorjimmy.utils.formatting import HELP_TEXT

logger = logging.getLogger(__name__)


class InfoCommands(commands.Cog):
    """Ping and help."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="ping", description="Respond with Pong!")
    async def ping(self, inter: discord.Interaction):
        logger.info("Received /ping in guild %s", inter.guild_id)
        await inter.response.send_message(embed=EmbedFactory().success("Pong!"))

    @app_commands.command(name="help", description="List the commands Poor Jimmy understands")
    async def help(self, inter: discord.Interaction):
        await inter.response.send_message(embed=EmbedFactory().info(HELP_TEXT))


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(InfoCommands(bot))
