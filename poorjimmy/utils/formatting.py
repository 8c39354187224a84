"""Text helpers shared by the slash commands and playback announcements."""

from __future__ import annotations

from typing import Iterable, Optional

FILLED = "▓"
EMPTY = "░"
WATCH_URL = "https://www.youtube.com/watch?v={}"


def format_duration(seconds: float) -> str:
    """Format seconds as ``MM:SS``, or ``HH:MM:SS`` from one hour upwards."""
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_search_duration(seconds: Optional[float]) -> str:
    """Compact ``M:SS`` used on search result cards."""
    if seconds is None:
        return "Unknown"
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{secs:02d}"


def progress_fraction(current: float, total: Optional[float]) -> float:
    """Return ``current / total`` clamped to ``[0, 1]``.

    An unknown total counts as the current position, so a track of unknown
    length always renders as complete once it has started.
    """
    if total is None:
        total = current
    if total <= 0:
        return 0.0
    return max(0.0, min(current / total, 1.0))


def progress_bar(current: float, total: Optional[float], length: int = 20) -> str:
    """Render ``[▓▓▓░░░] 02:30 / 05:00`` for now playing embeds."""
    filled = round(progress_fraction(current, total) * length)
    empty = max(0, length - filled)
    end = format_duration(total if total is not None else current)
    return f"[{FILLED * filled}{EMPTY * empty}] {format_duration(current)} / {end}"


def is_valid_youtube_url(url: str) -> bool:
    """Accept ``youtube.com/watch`` links and ``youtu.be`` share links only."""
    return ("youtube.com" in url and "/watch" in url) or "youtu.be" in url


def watch_url(video_id: str) -> str:
    return WATCH_URL.format(video_id)


def format_queue_description(titles: Iterable[str]) -> str:
    """Number each title as ``**1:** Title`` on its own line."""
    return "".join(f"**{index}:** {title}\n" for index, title in enumerate(titles, start=1))


def format_play_description(title: str, queued: bool) -> str:
    if queued:
        return f"**Queued** {title}!"
    return f"**Playing** {title}!"


HELP_TEXT = (
    "**Poor Jimmy commands**\n"
    "**/join** Summon Poor Jimmy to your voice channel\n"
    "**/leave** Remove Poor Jimmy from the voice channel\n"
    "**/play-url** Play the audio from a YouTube URL\n"
    "**/play-title** Play the audio from a YouTube video searching by title\n"
    "**/search** Search YouTube and choose a video's audio to play\n"
    "**/now-playing** Show the currently playing song with progress\n"
    "**/list** Display the current queue of songs\n"
    "**/pause** Pause the current song\n"
    "**/resume** Resume the current song\n"
    "**/skip** Skip the current song\n"
    "**/loop** Enable/disable looping for the current song\n"
    "**/clear** Stop the current song and clear the queue\n"
    "**/ping** Respond with Pong!\n"
    "**/help** Show this message"
)
