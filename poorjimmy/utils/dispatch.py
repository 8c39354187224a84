"""Routing table keys for component (button) interactions."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

SEARCH_PLAY_PREFIX = "search_play_"


class ButtonAction(str, Enum):
    CLEAR = "clear"
    LOOP = "loop"
    PAUSE = "pause"
    RESUME = "resume"
    SKIP = "skip"
    SEARCH_PLAY = "search_play"
    UNKNOWN = "unknown"


_FIXED = {
    action.value: action
    for action in (ButtonAction.CLEAR, ButtonAction.LOOP, ButtonAction.PAUSE, ButtonAction.RESUME, ButtonAction.SKIP)
}


def parse_custom_id(custom_id: Optional[str]) -> Tuple[ButtonAction, Optional[str]]:
    """Map a component ``custom_id`` to its action and optional argument.

    ``search_play_<video_id>`` yields ``(SEARCH_PLAY, video_id)``; anything not
    recognised, including an empty video id, is ``UNKNOWN``.
    """
    if not custom_id:
        return ButtonAction.UNKNOWN, None
    action = _FIXED.get(custom_id)
    if action:
        return action, None
    if custom_id.startswith(SEARCH_PLAY_PREFIX):
        video_id = custom_id[len(SEARCH_PLAY_PREFIX):]
        if video_id:
            return ButtonAction.SEARCH_PLAY, video_id
    return ButtonAction.UNKNOWN, None


def search_play_id(video_id: str) -> str:
    return f"{SEARCH_PLAY_PREFIX}{video_id}"
