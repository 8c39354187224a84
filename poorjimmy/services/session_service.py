"""Per-guild voice sessions and the registry that owns them."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

import discord

from poorjimmy.services.lavalink_service import JimmyPlayer, LavalinkVoiceClient

logger = logging.getLogger(__name__)


@dataclass
class GuildSession:
    """The live association between a guild and its voice connection.

    ``lock`` serialises every queue operation for the guild.
    """

    guild_id: int
    text_channel_id: Optional[int]
    player: JimmyPlayer
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def queue_length(self) -> int:
        """Pending tracks plus the current one."""
        return len(self.player.queue) + (1 if self.player.current else 0)

    @property
    def is_idle(self) -> bool:
        return self.queue_length == 0


class SessionRegistry:
    """Mapping of guild id to its active :class:`GuildSession`.

    Sessions are inserted by a join and removed by a leave or an
    auto-disconnect; nothing else creates or drops them.
    """

    def __init__(self) -> None:
        self._sessions: Dict[int, GuildSession] = {}

    def add(self, session: GuildSession) -> GuildSession:
        self._sessions[session.guild_id] = session
        return session

    def get(self, guild_id: Optional[int]) -> Optional[GuildSession]:
        if guild_id is None:
            return None
        return self._sessions.get(guild_id)

    def remove(self, guild_id: int) -> Optional[GuildSession]:
        return self._sessions.pop(guild_id, None)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[GuildSession]:
        return iter(list(self._sessions.values()))


class VoiceSessionManager:
    """Join and leave voice channels, keeping the registry in step."""

    def __init__(self, bot: discord.Client, registry: SessionRegistry) -> None:
        self.bot = bot
        self.registry = registry

    async def join(self, channel: discord.VoiceChannel, text_channel_id: Optional[int]) -> GuildSession:
        """Connect to ``channel`` (or move there) and register a fresh session."""
        guild = channel.guild
        manager = getattr(self.bot, "lavalink_manager", None)
        if manager:
            await manager.ensure_ready()

        if guild.voice_client is None:
            await channel.connect(cls=LavalinkVoiceClient)  # type: ignore[arg-type]
        else:
            await guild.change_voice_state(channel=channel, self_deaf=True)

        player: JimmyPlayer = self.bot.lavalink.player_manager.create(guild.id)  # type: ignore[attr-defined]
        player.text_channel_id = text_channel_id
        session = self.registry.add(GuildSession(guild.id, text_channel_id, player))
        logger.info("Joined voice channel %s in guild %s", channel.id, guild.id)
        return session

    async def leave(self, guild_id: int) -> bool:
        """Disconnect from voice in ``guild_id``.

        Returns ``False`` when the bot had no connection there. Calling it
        for a guild that was already left is harmless.
        """
        session = self.registry.remove(guild_id)
        guild = self.bot.get_guild(guild_id)
        voice_client = guild.voice_client if guild else None

        if voice_client is None:
            if session is not None:
                await self._destroy_player(guild_id)
            return session is not None

        await voice_client.disconnect(force=True)
        logger.info("Left voice channel in guild %s", guild_id)
        return True

    async def _destroy_player(self, guild_id: int) -> None:
        client = getattr(self.bot, "lavalink", None)
        if client is None:
            return
        try:
            await client.player_manager.destroy(guild_id)
        except Exception as exc:
            logger.warning("Failed to destroy Lavalink player for guild %s: %s", guild_id, exc)
