"""Button rows attached to playback and search messages.

The buttons carry stable ``custom_id`` values and no callbacks of their own;
``events/component_events.py`` routes every click, so the buttons keep
working after a restart.
"""

from __future__ import annotations

from typing import Sequence

import discord

from poorjimmy.utils.dispatch import ButtonAction, search_play_id

MAX_SEARCH_BUTTONS = 5
# Clicks route through on_interaction by custom_id before and after expiry.
VIEW_TIMEOUT = 120.0

_MUSIC_BUTTONS = (
    (ButtonAction.CLEAR, "📋 Clear", discord.ButtonStyle.danger),
    (ButtonAction.RESUME, "▶️ Resume", discord.ButtonStyle.success),
    (ButtonAction.PAUSE, "⏸️ Pause", discord.ButtonStyle.primary),
    (ButtonAction.SKIP, "⏭️ Skip", discord.ButtonStyle.primary),
    (ButtonAction.LOOP, "🔄 Loop", discord.ButtonStyle.primary),
)


def music_buttons(*, timeout: float = VIEW_TIMEOUT) -> discord.ui.View:
    """Clear / Resume / Pause / Skip / Loop in a single row."""
    view = discord.ui.View(timeout=timeout)
    for action, label, style in _MUSIC_BUTTONS:
        view.add_item(discord.ui.Button(label=label, style=style, custom_id=action.value))
    return view


def search_buttons(video_ids: Sequence[str], *, timeout: float = VIEW_TIMEOUT) -> discord.ui.View:
    """One ``Option <n>`` button per search result, in result order."""
    view = discord.ui.View(timeout=timeout)
    for index, video_id in enumerate(video_ids[:MAX_SEARCH_BUTTONS], start=1):
        view.add_item(
            discord.ui.Button(
                label=f"Option {index}",
                style=discord.ButtonStyle.primary,
                custom_id=search_play_id(video_id),
            )
        )
    return view
