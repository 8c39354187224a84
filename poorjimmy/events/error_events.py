"""Global command error handling."""

import traceback

import discord
from discord import app_commands
from discord.ext import commands

from poorjimmy.utils.embeds import EmbedFactory
from poorjimmy.utils.exceptions import UserFacingError


class ErrorEvents(commands.Cog):
    """Log unexpected errors and surface friendly messages to users."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot
        self._previous_handler = bot.tree.on_error

    async def cog_load(self) -> None:
        self.bot.tree.on_error = self.on_tree_error  # type: ignore[assignment]

    async def cog_unload(self) -> None:
        self.bot.tree.on_error = self._previous_handler  # type: ignore[assignment]

    async def _reply(self, interaction: discord.Interaction, embed: discord.Embed) -> None:
        if interaction.response.is_done():
            await interaction.followup.send(embed=embed, ephemeral=True)
        else:
            await interaction.response.send_message(embed=embed, ephemeral=True)

    async def on_tree_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError
    ) -> None:
        """Global error handler for app commands (slash commands)."""
        factory = EmbedFactory()
        bot_logger = getattr(self.bot, "logger", None)
        original = getattr(error, "original", error)
        if isinstance(original, UserFacingError):
            try:
                await self._reply(interaction, factory.error(original.message))
            except Exception as e:
                if bot_logger:
                    bot_logger.debug("Suppressed error sending UserFacingError: %s", e)
            return

        if bot_logger:
            bot_logger.error(
                "Unhandled app command error: %s",
                "".join(traceback.format_exception(type(error), error, error.__traceback__)),
            )
        try:
            await self._reply(interaction, factory.error("Unexpected error. Please try again later."))
        except Exception as e:
            if bot_logger:
                bot_logger.debug("Suppressed error sending fallback embed: %s", e)


async def setup(bot: commands.Bot) -> None:
    """Entry point used by ``discord.ext.commands`` to register the cog."""
    await bot.add_cog(ErrorEvents(bot))
