"""
Tests for URL/title resolution (poorjimmy/services/track_service.py).
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from poorjimmy.services.queue_service import QueueService, QueueStatus
from poorjimmy.services.session_service import GuildSession, SessionRegistry
from poorjimmy.services.track_service import SEARCH_FAILED, TrackService
from poorjimmy.services.ytdlp_service import SearchResult
from poorjimmy.utils.exceptions import YtDlpError
from poorjimmy.utils.tracks import track_metadata
from scenarios.mock_lavalink import MockLavalink, MockPlayer, MockTrack

GUILD = 9
URL = "https://www.youtube.com/watch?v=abc"


@pytest.fixture
def player():
    return MockPlayer(GUILD)


@pytest.fixture
def lavalink():
    client = MockLavalink()
    client.register(URL, [MockTrack("Lavalink Title", duration=215_000, artwork_url="http://art")])
    return client


@pytest.fixture
def ytdlp():
    return MagicMock()


@pytest.fixture
def service(player, lavalink, ytdlp):
    registry = SessionRegistry()
    registry.add(GuildSession(GUILD, 1, player))
    bot = MagicMock()
    bot.lavalink = lavalink
    return TrackService(bot, QueueService(registry), ytdlp)


@pytest.mark.asyncio
async def test_play_url_uses_lavalink_metadata(service, player):
    outcome = await service.play_url(GUILD, URL, requester=5)
    assert outcome.status is QueueStatus.PLAYING
    assert outcome.message == "**Playing** Lavalink Title!"
    metadata = track_metadata(player.current)
    assert metadata.duration == 215
    assert metadata.thumbnail_url == "http://art"


@pytest.mark.asyncio
async def test_play_url_nothing_loaded(service):
    outcome = await service.play_url(GUILD, "https://youtu.be/missing")
    assert outcome.status is QueueStatus.NOT_FOUND
    assert outcome.is_error


@pytest.mark.asyncio
async def test_play_url_without_session(lavalink, ytdlp):
    bot = MagicMock()
    bot.lavalink = lavalink
    service = TrackService(bot, QueueService(SessionRegistry()), ytdlp)
    outcome = await service.play_url(GUILD, URL)
    assert outcome.status is QueueStatus.NO_SESSION


@pytest.mark.asyncio
async def test_play_title_prefers_search_metadata(service, ytdlp, player):
    ytdlp.first = AsyncMock(
        return_value=SearchResult(id="abc", title="Search Title", duration=61.7, thumbnails=("http://s", "http://l"))
    )
    outcome = await service.play_title(GUILD, "some song")
    assert outcome.message == "**Playing** Search Title!"
    metadata = track_metadata(player.current)
    assert metadata.title == "Search Title"
    assert metadata.thumbnail_url == "http://l"
    assert metadata.duration == 61


@pytest.mark.asyncio
async def test_play_title_no_results(service, ytdlp):
    ytdlp.first = AsyncMock(return_value=None)
    outcome = await service.play_title(GUILD, "zzzz")
    assert outcome.status is QueueStatus.NOT_FOUND
    assert outcome.message == 'No results found for "zzzz"'


@pytest.mark.asyncio
async def test_play_title_search_failure(service, ytdlp):
    ytdlp.first = AsyncMock(side_effect=YtDlpError("exit 1"))
    outcome = await service.play_title(GUILD, "song")
    assert outcome.status is QueueStatus.FAILED
    assert outcome.message == SEARCH_FAILED


@pytest.mark.asyncio
async def test_load_error_is_logged_and_none(service, lavalink):
    lavalink.get_tracks = AsyncMock(side_effect=RuntimeError("node offline"))
    assert await service.load(URL) is None
