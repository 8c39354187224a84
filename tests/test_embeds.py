import pytest
from unittest.mock import patch

import discord

from poorjimmy.services.queue_service import QueueOutcome, QueueStatus
from poorjimmy.utils.embeds import EmbedFactory
from poorjimmy.utils.tracks import TrackMetadata


@pytest.fixture
def mock_config():
    with patch("poorjimmy.utils.embeds.CONFIG") as mock:
        mock.theme.color_success = 0x1F8B4C
        mock.theme.color_error = 0x992D22
        mock.theme.color_info = 0x3498DB
        mock.theme.footer_text = "Footer"
        mock.theme.footer_icon_url = "http://footer.icon"
        yield mock


def test_generic_colours(mock_config):
    factory = EmbedFactory()
    assert factory.success("ok").color.value == 0x1F8B4C
    assert factory.error("bad").color.value == 0x992D22
    assert factory.info("fyi", title="Help").title == "Help"
    assert factory.success("ok").footer.text == "Footer"


def test_no_footer_when_unset(mock_config):
    mock_config.theme.footer_text = None
    assert EmbedFactory().success("ok").footer.text is None


def test_outcome_error_is_red(mock_config):
    outcome = QueueOutcome(QueueStatus.NO_SESSION, "Error pausing song!", is_error=True)
    embed = EmbedFactory().outcome(outcome)
    assert embed.color.value == 0x992D22
    assert embed.description == "Error pausing song!"


def test_outcome_playing_shows_artwork(mock_config):
    metadata = TrackMetadata(title="Song", thumbnail_url="http://art")
    outcome = QueueOutcome(QueueStatus.PLAYING, "**Playing** Song!", metadata=metadata)
    embed = EmbedFactory().outcome(outcome)
    assert embed.color.value == 0x1F8B4C
    assert embed.image.url == "http://art"


def test_outcome_queued_has_no_image(mock_config):
    metadata = TrackMetadata(title="Song", thumbnail_url="http://art")
    outcome = QueueOutcome(QueueStatus.QUEUED, "**Queued** Song!", metadata=metadata)
    assert EmbedFactory().outcome(outcome).image.url is None


def test_now_playing_card(mock_config):
    embed = EmbedFactory().now_playing("Song", "http://art")
    assert embed.description == "**Now playing:** Song"
    assert embed.image.url == "http://art"


def test_search_result_card(mock_config):
    embed = EmbedFactory().search_result(
        index=2, title="Song", video_id="abc", duration=61, thumbnail="http://thumb"
    )
    assert isinstance(embed, discord.Embed)
    assert embed.title == "2. Song"
    assert embed.description == "Duration: 1:01"
    assert embed.url == "https://www.youtube.com/watch?v=abc"
    assert embed.thumbnail.url == "http://thumb"
    assert embed.color.value == 0x3498DB
