"""
Tests for the session registry and voice session manager (poorjimmy/services/session_service.py).
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from poorjimmy.services.session_service import GuildSession, SessionRegistry, VoiceSessionManager
from scenarios.mock_lavalink import MockLavalink, MockPlayer, MockTrack


def _session(guild_id=1, channel_id=10):
    return GuildSession(guild_id, channel_id, MockPlayer(guild_id))


class TestSessionRegistry:
    def test_add_and_get(self):
        registry = SessionRegistry()
        session = registry.add(_session())
        assert registry.get(1) is session
        assert 1 in registry
        assert len(registry) == 1

    def test_get_none_guild(self):
        assert SessionRegistry().get(None) is None

    def test_remove(self):
        registry = SessionRegistry()
        registry.add(_session())
        assert registry.remove(1) is not None
        assert registry.remove(1) is None
        assert 1 not in registry

    def test_iter_is_snapshot(self):
        registry = SessionRegistry()
        registry.add(_session(1))
        registry.add(_session(2))
        for session in registry:
            registry.remove(session.guild_id)
        assert len(registry) == 0


class TestGuildSession:
    def test_queue_length_counts_current(self):
        session = _session()
        assert session.is_idle
        session.player.current = MockTrack("Now")
        session.player.queue.append(MockTrack("Next"))
        assert session.queue_length == 2
        assert not session.is_idle


def _bot(voice_client=None):
    bot = MagicMock()
    bot.lavalink = MockLavalink()
    bot.lavalink_manager.ensure_ready = AsyncMock()
    guild = MagicMock()
    guild.id = 5
    guild.voice_client = voice_client
    guild.change_voice_state = AsyncMock()
    bot.get_guild.return_value = guild
    return bot, guild


class TestVoiceSessionManager:
    @pytest.mark.asyncio
    async def test_join_registers_session(self):
        bot, guild = _bot()
        channel = MagicMock()
        channel.guild = guild
        channel.connect = AsyncMock()
        registry = SessionRegistry()

        session = await VoiceSessionManager(bot, registry).join(channel, 99)

        channel.connect.assert_awaited_once()
        assert registry.get(5) is session
        assert session.text_channel_id == 99
        assert session.player.text_channel_id == 99

    @pytest.mark.asyncio
    async def test_join_when_connected_moves(self):
        bot, guild = _bot(voice_client=MagicMock())
        channel = MagicMock()
        channel.guild = guild
        channel.connect = AsyncMock()

        await VoiceSessionManager(bot, SessionRegistry()).join(channel, 99)

        channel.connect.assert_not_awaited()
        guild.change_voice_state.assert_awaited_once_with(channel=channel, self_deaf=True)

    @pytest.mark.asyncio
    async def test_leave_disconnects_and_unregisters(self):
        voice_client = MagicMock()
        voice_client.disconnect = AsyncMock()
        bot, _ = _bot(voice_client=voice_client)
        registry = SessionRegistry()
        registry.add(_session(5))

        assert await VoiceSessionManager(bot, registry).leave(5) is True
        voice_client.disconnect.assert_awaited_once_with(force=True)
        assert 5 not in registry

    @pytest.mark.asyncio
    async def test_leave_without_connection(self):
        bot, _ = _bot()
        assert await VoiceSessionManager(bot, SessionRegistry()).leave(5) is False
