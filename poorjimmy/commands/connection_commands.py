"""Voice connection command set."""

# pyright: reportMissingTypeStubs=false

from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from poorjimmy.services.queue_service import JOIN_HINT
from poorjimmy.utils.embeds import EmbedFactory
from poorjimmy.utils.exceptions import UserFacingError
from poorjimmy.utils.formatting import HELP_TEXT

logger = logging.getLogger(__name__)


class ConnectionCommands(commands.Cog):
    """Join and leave voice channels."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @staticmethod
    def _voice_channel(inter: discord.Interaction):
        """Return the voice channel the invoking member is in, if any."""
        if not inter.guild:
            raise UserFacingError("This command can only be used in a server!")
        member = inter.guild.get_member(inter.user.id) if isinstance(inter.user, discord.User) else inter.user
        voice = getattr(member, "voice", None)
        return voice.channel if voice else None

    @app_commands.command(name="join", description="Summon Poor Jimmy to your voice channel")
    async def join(self, inter: discord.Interaction):
        """Connect to the caller's voice channel and post the command overview."""
        factory = EmbedFactory()
        channel = self._voice_channel(inter)
        await inter.response.defer()

        if channel is None:
            logger.warning(
                "User %s attempted to use /join but is not in a voice channel (guild %s)",
                inter.user.id,
                inter.guild_id,
            )
            return await inter.followup.send(embed=factory.error("You're not in a voice channel!"))

        logger.info("Attempting to join voice channel %s in guild %s", channel.id, inter.guild_id)
        try:
            await self.bot.voice.join(channel, inter.channel_id)  # type: ignore[attr-defined]
        except Exception as exc:
            logger.error("Failed to join voice channel %s in guild %s: %s", channel.id, inter.guild_id, exc)
            return await inter.followup.send(embed=factory.error("Error joining voice channel!"))

        self.bot.coordinator.reset(channel.guild.id)  # type: ignore[attr-defined]
        await inter.followup.send(embed=factory.success("Poor Jimmy **joined** the voice channel!"))
        try:
            await inter.followup.send(embed=factory.info(HELP_TEXT))
        except discord.HTTPException as exc:
            logger.error("Failed to send help followup: %s", exc)

    @app_commands.command(name="leave", description="Remove Poor Jimmy from the voice channel")
    async def leave(self, inter: discord.Interaction):
        """Disconnect from voice and drop the guild's session."""
        factory = EmbedFactory()
        if not inter.guild:
            raise UserFacingError("This command can only be used in a server!")

        self.bot.coordinator.forget(inter.guild.id)  # type: ignore[attr-defined]
        try:
            left = await self.bot.voice.leave(inter.guild.id)  # type: ignore[attr-defined]
        except Exception as exc:
            logger.error("Failed to leave voice channel in guild %s: %s", inter.guild.id, exc)
            left = False

        if not left:
            return await inter.response.send_message(
                embed=factory.error(f"Error leaving voice channel! {JOIN_HINT}")
            )
        await inter.response.send_message(embed=factory.success("Poor Jimmy **left** the voice channel!"))


async def setup(bot: commands.Bot):
    await bot.add_cog(ConnectionCommands(bot))
