"""Route button clicks to queue operations."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, Optional

import discord
from discord.ext import commands

from poorjimmy.services.queue_service import QueueOutcome
from poorjimmy.ui.buttons import music_buttons
from poorjimmy.utils.dispatch import ButtonAction, parse_custom_id
from poorjimmy.utils.embeds import EmbedFactory
from poorjimmy.utils.formatting import watch_url

logger = logging.getLogger(__name__)

ButtonHandler = Callable[[discord.Interaction, Optional[str]], Awaitable[None]]


class ComponentEvents(commands.Cog):
    """Dispatch component interactions by their ``custom_id``."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.handlers: Dict[ButtonAction, ButtonHandler] = {
            ButtonAction.CLEAR: self._queue_action("clear"),
            ButtonAction.LOOP: self._queue_action("toggle_loop"),
            ButtonAction.PAUSE: self._queue_action("pause"),
            ButtonAction.RESUME: self._queue_action("resume"),
            ButtonAction.SKIP: self._queue_action("skip"),
            ButtonAction.SEARCH_PLAY: self._search_play,
            ButtonAction.UNKNOWN: self._unknown,
        }

    @commands.Cog.listener()
    async def on_interaction(self, interaction: discord.Interaction):
        if interaction.type is not discord.InteractionType.component:
            return
        data = interaction.data or {}
        action, argument = parse_custom_id(data.get("custom_id"))
        logger.debug("Button %s pressed in guild %s", action.value, interaction.guild_id)
        await self.handlers[action](interaction, argument)

    def _queue_action(self, operation: str) -> ButtonHandler:
        async def handler(interaction: discord.Interaction, _argument: Optional[str]) -> None:
            queue = self.bot.queue  # type: ignore[attr-defined]
            outcome: QueueOutcome = await getattr(queue, operation)(interaction.guild_id)
            try:
                await interaction.response.send_message(embed=EmbedFactory().outcome(outcome))
            except discord.HTTPException as exc:
                logger.error("Failed to respond to %s button: %s", operation, exc)

        return handler

    async def _unknown(self, interaction: discord.Interaction, _argument: Optional[str]) -> None:
        try:
            await interaction.response.send_message(embed=EmbedFactory().error("Unknown command!"))
        except discord.HTTPException as exc:
            logger.error("Failed to respond to unknown button: %s", exc)

    async def _search_play(self, interaction: discord.Interaction, video_id: Optional[str]) -> None:
        """Replace the result list with a loading note, remove it, then enqueue."""
        factory = EmbedFactory()
        try:
            await interaction.response.defer()
        except discord.HTTPException as exc:
            logger.error("Failed to defer search component interaction: %s", exc)
            return

        url = watch_url(video_id or "")
        logger.debug("Playing selected video: %s", url)
        try:
            await interaction.edit_original_response(embed=factory.info("Adding track to queue..."), view=None)
        except discord.HTTPException as exc:
            logger.error("Failed to update search results message: %s", exc)
        try:
            await interaction.delete_original_response()
        except discord.HTTPException as exc:
            logger.error("Failed to delete loading message: %s", exc)

        outcome = await self.bot.tracks.play_url(  # type: ignore[attr-defined]
            interaction.guild_id, url, requester=interaction.user.id
        )
        view = None if outcome.is_error else music_buttons()
        try:
            if view is None:
                await interaction.followup.send(embed=factory.outcome(outcome))
            else:
                await interaction.followup.send(embed=factory.outcome(outcome), view=view)
        except discord.HTTPException as exc:
            logger.error("Failed to send enqueue result: %s", exc)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(ComponentEvents(bot))
