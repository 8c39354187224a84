"""
Tests for the /search slash command (poorjimmy/commands/music_controls.py).
The yt-dlp service is mocked; replies are inspected on the followup.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from poorjimmy.commands.music_controls import MusicControls
from poorjimmy.configs.settings import CONFIG
from poorjimmy.services.track_service import SEARCH_FAILED
from poorjimmy.services.ytdlp_service import SearchResult
from poorjimmy.utils.exceptions import UserFacingError, YtDlpError


def _interaction(guild_id=3):
    interaction = MagicMock()
    interaction.guild_id = guild_id
    interaction.response.defer = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def bot():
    bot = MagicMock()
    bot.ytdlp.search = AsyncMock(return_value=[])
    return bot


async def _search(bot, interaction, query):
    cog = MusicControls(bot)
    await cog.search.callback(cog, interaction, query)


@pytest.mark.asyncio
async def test_no_results_replies_without_buttons(bot):
    interaction = _interaction()
    await _search(bot, interaction, "  obscure b-side ")

    bot.ytdlp.search.assert_awaited_once_with("obscure b-side")
    kwargs = interaction.followup.send.await_args.kwargs
    assert kwargs["embed"].description == 'No results found for "obscure b-side"'
    assert kwargs["embed"].color.value == CONFIG.theme.color_error
    assert "view" not in kwargs


@pytest.mark.asyncio
async def test_search_failure_reports_generic_error(bot):
    bot.ytdlp.search = AsyncMock(side_effect=YtDlpError("timed out"))
    interaction = _interaction()
    await _search(bot, interaction, "query")

    kwargs = interaction.followup.send.await_args.kwargs
    assert kwargs["embed"].description == SEARCH_FAILED
    assert kwargs["embed"].color.value == CONFIG.theme.color_error
    assert "view" not in kwargs


@pytest.mark.asyncio
async def test_results_get_one_embed_and_option_button_each(bot):
    bot.ytdlp.search = AsyncMock(
        return_value=[
            SearchResult(id="a1", title="One", duration=61.0, thumbnails=("http://thumb",)),
            SearchResult(id="b2", title="Two"),
        ]
    )
    interaction = _interaction()
    await _search(bot, interaction, "query")

    interaction.response.defer.assert_awaited_once()
    kwargs = interaction.followup.send.await_args.kwargs
    embeds = kwargs["embeds"]
    assert [e.title for e in embeds] == ["1. One", "2. Two"]
    assert embeds[0].url == "https://www.youtube.com/watch?v=a1"
    assert embeds[0].thumbnail.url == "http://thumb"
    view = kwargs["view"]
    assert [item.label for item in view.children] == ["Option 1", "Option 2"]
    assert [item.custom_id for item in view.children] == ["search_play_a1", "search_play_b2"]
    assert view.timeout is not None


@pytest.mark.asyncio
async def test_blank_query_is_rejected(bot):
    interaction = _interaction()
    with pytest.raises(UserFacingError):
        await _search(bot, interaction, "   ")
    bot.ytdlp.search.assert_not_awaited()


@pytest.mark.asyncio
async def test_search_outside_a_server(bot):
    interaction = _interaction(guild_id=None)
    with pytest.raises(UserFacingError):
        await _search(bot, interaction, "query")
