import pytest

import discord

from poorjimmy.ui.buttons import VIEW_TIMEOUT, music_buttons, search_buttons


@pytest.mark.asyncio
async def test_music_buttons_layout():
    view = music_buttons()
    assert view.timeout == VIEW_TIMEOUT
    assert [item.custom_id for item in view.children] == ["clear", "resume", "pause", "skip", "loop"]
    assert view.children[0].style is discord.ButtonStyle.danger
    assert view.children[1].style is discord.ButtonStyle.success


@pytest.mark.asyncio
async def test_search_buttons_labels_and_ids():
    view = search_buttons(["a", "b", "c"])
    assert [item.label for item in view.children] == ["Option 1", "Option 2", "Option 3"]
    assert [item.custom_id for item in view.children] == ["search_play_a", "search_play_b", "search_play_c"]


@pytest.mark.asyncio
async def test_search_buttons_capped_at_one_row():
    assert len(search_buttons([str(i) for i in range(8)]).children) == 5


@pytest.mark.asyncio
async def test_views_expire():
    assert search_buttons(["a"]).timeout == VIEW_TIMEOUT
    assert music_buttons(timeout=5).timeout == 5
    assert search_buttons(["a"], timeout=5).timeout == 5
