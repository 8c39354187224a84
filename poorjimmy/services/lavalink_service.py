"""Abstractions for managing Lavalink connectivity and Discord voice connections."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from aiohttp import ClientConnectorError, ContentTypeError
import discord
import lavalink
from lavalink.errors import AuthenticationError

from poorjimmy.configs.schema import LavalinkConfig


class JimmyPlayer(lavalink.DefaultPlayer):
    """Lavalink player remembering where playback notifications are posted."""

    __slots__ = ("text_channel_id",)

    def __init__(self, guild_id: int, client: lavalink.Client) -> None:
        super().__init__(guild_id, client)
        self.text_channel_id: int | None = None


class LavalinkVoiceClient(discord.VoiceProtocol):
    """Voice protocol bridging discord.py voice state with Lavalink."""

    def __init__(self, client: discord.Client, channel: discord.abc.Connectable) -> None:
        self.client = client
        self.channel = channel
        self.guild_id = channel.guild.id
        self._destroyed = False
        self.logger = logging.getLogger("PoorJimmy.LavalinkVoice")

        if not hasattr(self.client, "lavalink"):
            raise RuntimeError("Lavalink client has not been initialised.")

        self.lavalink: lavalink.Client[JimmyPlayer] = self.client.lavalink

    async def connect(
        self,
        *,
        timeout: float,
        reconnect: bool,
        self_deaf: bool = False,
        self_mute: bool = False,
    ) -> None:
        """Create or reuse a player and join the voice channel."""
        self.lavalink.player_manager.create(self.guild_id)
        await self.channel.guild.change_voice_state(
            channel=self.channel, self_deaf=self_deaf, self_mute=self_mute
        )

    async def on_voice_server_update(self, data: dict[str, Any]) -> None:
        payload = {
            "t": "VOICE_SERVER_UPDATE",
            "d": data,
        }
        await self.lavalink.voice_update_handler(payload)

    async def on_voice_state_update(self, data: dict[str, Any]) -> None:
        channel_id = data.get("channel_id")

        if not channel_id:
            await self._destroy()
            return

        self.channel = self.client.get_channel(int(channel_id))  # type: ignore[assignment]

        payload = {
            "t": "VOICE_STATE_UPDATE",
            "d": data,
        }
        await self.lavalink.voice_update_handler(payload)

    async def disconnect(self, *, force: bool = False) -> None:
        player = self.lavalink.player_manager.get(self.guild_id)

        if not force and (player is None or not player.is_connected):
            return

        await self.channel.guild.change_voice_state(channel=None)
        if player is not None:
            player.channel_id = None
        await self._destroy()

    async def _destroy(self) -> None:
        self.cleanup()

        if self._destroyed:
            return

        self._destroyed = True
        try:
            await self.lavalink.player_manager.destroy(self.guild_id)
        except lavalink.ClientError:
            pass
        except ContentTypeError as exc:
            self.logger.warning(
                "Ignoring Lavalink response while destroying player %s: %s",
                self.guild_id,
                exc,
            )


class LavalinkManager:
    """Initialises and tears down the Lavalink client for the bot."""

    def __init__(self, bot: discord.Client, node: LavalinkConfig) -> None:
        self.bot = bot
        self.node_config = node
        self.logger = logging.getLogger("PoorJimmy.Lavalink")

    async def connect(self) -> None:
        if not hasattr(self.bot, "lavalink"):
            self.bot.lavalink = lavalink.Client(
                self.bot.user.id, player=JimmyPlayer  # type: ignore[arg-type]
            )

        client: lavalink.Client[JimmyPlayer] = self.bot.lavalink
        await self._register_node(client, self.node_config)

    async def _register_node(self, client: lavalink.Client[JimmyPlayer], config: LavalinkConfig) -> lavalink.Node:
        existing = next((node for node in client.node_manager.nodes if node.name == config.name), None)
        if existing:
            self.logger.info("Lavalink node '%s' already registered.", existing.name)
            return existing

        node = client.add_node(
            host=config.host,
            port=config.port,
            password=config.password,
            region=config.region,
            name=config.name,
            ssl=config.https,
            connect=False,
        )

        try:
            await node.connect(force=True)
            await asyncio.wait_for(node.get_version(), timeout=5)
        except AuthenticationError:
            self.logger.error(
                "Lavalink authentication failed for node '%s'. "
                "Verify the password in config.yml/.env matches the server configuration.",
                config.name,
            )
        except ClientConnectorError as exc:
            self.logger.error(
                "Could not reach Lavalink node '%s' at %s:%s (%s). Please ensure the server is running "
                "and accessible from this host.",
                config.name,
                config.host,
                config.port,
                exc.strerror or exc,
            )
        except asyncio.TimeoutError:
            self.logger.warning(
                "Timed out while verifying Lavalink node '%s'. Continuing but playback may fail.",
                config.name,
            )
        else:
            self.logger.info(
                "Authenticated Lavalink node %s (%s:%s, ssl=%s)",
                config.name,
                config.host,
                config.port,
                config.https,
            )
        return node

    async def ensure_ready(self) -> None:
        """Reconnect the node if it dropped since startup."""
        client: lavalink.Client | None = getattr(self.bot, "lavalink", None)
        if not client:
            return

        reconnect_tasks = [node.connect(force=True) for node in client.node_manager.nodes if not node.available]
        if reconnect_tasks:
            await asyncio.gather(*reconnect_tasks, return_exceptions=True)

    async def close(self) -> None:
        if hasattr(self.bot, "lavalink"):
            try:
                await self.bot.lavalink.close()
            except Exception as exc:  # pragma: no cover
                self.logger.error("Error closing Lavalink: %s", exc)
