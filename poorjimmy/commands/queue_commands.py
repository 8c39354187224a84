from __future__ import annotations

import discord
from discord import app_commands
from discord.ext import commands

from poorjimmy.services.queue_service import JOIN_HINT
from poorjimmy.utils.embeds import EmbedFactory
from poorjimmy.utils.exceptions import UserFacingError
from poorjimmy.utils.formatting import format_queue_description


class QueueCommands(commands.Cog):
    """Queue inspection commands."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="list", description="Display the current queue of songs")
    async def list_queue(self, inter: discord.Interaction):
        """Number every track, the one playing first."""
        factory = EmbedFactory()
        if inter.guild_id is None:
            raise UserFacingError("This command can only be used in a server!")

        snapshot = await self.bot.queue.snapshot(inter.guild_id)  # type: ignore[attr-defined]
        if snapshot is None:
            return await inter.response.send_message(embed=factory.error(f"Error listing queue! {JOIN_HINT}"))

        titles = snapshot.titles
        if not titles:
            return await inter.response.send_message(embed=factory.success("The queue is **empty!**"))
        await inter.response.send_message(embed=factory.success(format_queue_description(titles)))


async def setup(bot: commands.Bot):
    await bot.add_cog(QueueCommands(bot))
