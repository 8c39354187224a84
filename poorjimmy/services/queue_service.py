"""Bot-level queue operations on top of the Lavalink player."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

from poorjimmy.services.session_service import GuildSession, SessionRegistry
from poorjimmy.utils.formatting import format_play_description
from poorjimmy.utils.tracks import TrackMetadata, attach_metadata, track_metadata

if TYPE_CHECKING:
    from poorjimmy.services.disconnect_service import AutoDisconnectCoordinator

logger = logging.getLogger(__name__)

JOIN_HINT = "Ensure Poor Jimmy is in a voice channel with **/join**"


class QueueStatus(Enum):
    NO_SESSION = "no_session"
    FAILED = "failed"
    PLAYING = "playing"
    QUEUED = "queued"
    CLEARED = "cleared"
    NOTHING_TO_CLEAR = "nothing_to_clear"
    SKIPPED = "skipped"
    NOTHING_TO_SKIP = "nothing_to_skip"
    PAUSED = "paused"
    ALREADY_PAUSED = "already_paused"
    NOTHING_TO_PAUSE = "nothing_to_pause"
    RESUMED = "resumed"
    ALREADY_PLAYING = "already_playing"
    NOTHING_TO_RESUME = "nothing_to_resume"
    LOOP_ENABLED = "loop_enabled"
    LOOP_DISABLED = "loop_disabled"
    NOTHING_TO_LOOP = "nothing_to_loop"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class QueueOutcome:
    """Result of a queue operation, ready to be shown to the user."""

    status: QueueStatus
    message: str
    is_error: bool = False
    metadata: Optional[TrackMetadata] = None


@dataclass
class QueueSnapshot:
    """Read-only view of a guild's queue for display."""

    current: Optional[TrackMetadata]
    position: float
    paused: bool
    looping: bool
    upcoming: List[TrackMetadata] = field(default_factory=list)

    @property
    def titles(self) -> List[str]:
        titles = [self.current.title] if self.current else []
        titles.extend(item.title for item in self.upcoming)
        return titles


def no_session_outcome(action: str) -> QueueOutcome:
    return QueueOutcome(QueueStatus.NO_SESSION, f"Error {action}! {JOIN_HINT}", is_error=True)


def _failed(action: str) -> QueueOutcome:
    return QueueOutcome(QueueStatus.FAILED, f"Error {action}!", is_error=True)


def _discard(queue: List[Any], track: Any) -> None:
    """Drop ``track`` itself from ``queue``; equal-looking tracks stay."""
    for index, queued in enumerate(queue):
        if queued is track:
            del queue[index]
            return


class QueueService:
    """Translate playback intents into calls on a guild's Lavalink player.

    Every operation takes the session lock first. Nothing here raises for
    expected conditions; the returned :class:`QueueOutcome` says what
    happened.
    """

    def __init__(self, registry: SessionRegistry, coordinator: Optional["AutoDisconnectCoordinator"] = None):
        self.registry = registry
        self.coordinator = coordinator

    def _session(self, guild_id: Optional[int]) -> Optional[GuildSession]:
        return self.registry.get(guild_id)

    async def enqueue(
        self,
        guild_id: Optional[int],
        track: Any,
        metadata: TrackMetadata,
        *,
        requester: Optional[int] = None,
    ) -> QueueOutcome:
        """Append ``track`` and start playback if the player was idle."""
        session = self._session(guild_id)
        if session is None:
            logger.error("Bot is not in a voice channel in guild %s. Cannot enqueue track.", guild_id)
            return no_session_outcome("playing song")

        async with session.lock:
            player = session.player
            attach_metadata(track, metadata)
            try:
                if requester:
                    player.add(track, requester=requester)
                else:
                    player.add(track)
                queued = player.current is not None
                if not queued:
                    await player.play()
            except Exception as exc:
                _discard(player.queue, track)
                logger.error("Failed to enqueue '%s' in guild %s: %s", metadata.title, session.guild_id, exc)
                return _failed("playing song")

        if self.coordinator:
            self.coordinator.cancel(session.guild_id)
        logger.info("Enqueueing track: '%s' in guild %s", metadata.title, session.guild_id)
        status = QueueStatus.QUEUED if queued else QueueStatus.PLAYING
        return QueueOutcome(status, format_play_description(metadata.title, queued), metadata=metadata)

    async def clear(self, guild_id: Optional[int]) -> QueueOutcome:
        """Stop the current track and discard everything pending."""
        session = self._session(guild_id)
        if session is None:
            return no_session_outcome("clearing queue")

        async with session.lock:
            if session.queue_length == 0:
                return QueueOutcome(QueueStatus.NOTHING_TO_CLEAR, "There is nothing to clear!")
            try:
                session.player.queue.clear()
                await session.player.stop()
            except Exception as exc:
                logger.error("Failed to clear queue in guild %s: %s", session.guild_id, exc)
                return _failed("clearing queue")

        if self.coordinator:
            self.coordinator.arm(session.guild_id)
        return QueueOutcome(QueueStatus.CLEARED, "Queue **cleared!**")

    async def skip(self, guild_id: Optional[int]) -> QueueOutcome:
        """Stop only the current track; the player advances on its own."""
        session = self._session(guild_id)
        if session is None:
            logger.warning("Attempted to skip song but bot is not in voice channel (guild %s)", guild_id)
            return no_session_outcome("skipping song")

        async with session.lock:
            player = session.player
            if player.current is None:
                return QueueOutcome(QueueStatus.NOTHING_TO_SKIP, "There is no song currently playing!")
            try:
                # A single-track loop would replay the same track on skip.
                if player.loop == player.LOOP_SINGLE:
                    player.set_loop(player.LOOP_NONE)
                await player.skip()
            except Exception as exc:
                logger.error("Error skipping track in guild %s: %s", session.guild_id, exc)
                return _failed("skipping song")
        return QueueOutcome(QueueStatus.SKIPPED, "Song **skipped!**")

    async def pause(self, guild_id: Optional[int]) -> QueueOutcome:
        session = self._session(guild_id)
        if session is None:
            return no_session_outcome("pausing song")

        async with session.lock:
            player = session.player
            if player.current is None:
                return QueueOutcome(QueueStatus.NOTHING_TO_PAUSE, "There is no song to pause!")
            if player.paused:
                return QueueOutcome(QueueStatus.ALREADY_PAUSED, "The song is currently paused!")
            try:
                await player.set_pause(True)
            except Exception as exc:
                logger.error("Error pausing track in guild %s: %s", session.guild_id, exc)
                return _failed("pausing song")
        return QueueOutcome(QueueStatus.PAUSED, "Song **paused!** Use **/resume** to continue playback")

    async def resume(self, guild_id: Optional[int]) -> QueueOutcome:
        session = self._session(guild_id)
        if session is None:
            return no_session_outcome("resuming song")

        async with session.lock:
            player = session.player
            if player.current is None:
                return QueueOutcome(QueueStatus.NOTHING_TO_RESUME, "There is no song to resume!")
            if not player.paused:
                return QueueOutcome(QueueStatus.ALREADY_PLAYING, "The song is currently playing!")
            try:
                await player.set_pause(False)
            except Exception as exc:
                logger.error("Error resuming track in guild %s: %s", session.guild_id, exc)
                return _failed("resuming song")
        return QueueOutcome(QueueStatus.RESUMED, "Song **resumed!**")

    async def toggle_loop(self, guild_id: Optional[int]) -> QueueOutcome:
        """Flip the current track between looping forever and not looping."""
        session = self._session(guild_id)
        if session is None:
            return no_session_outcome("looping song")

        async with session.lock:
            player = session.player
            if player.current is None:
                return QueueOutcome(QueueStatus.NOTHING_TO_LOOP, "There is no song to loop!")
            try:
                if player.loop == player.LOOP_SINGLE:
                    player.set_loop(player.LOOP_NONE)
                    return QueueOutcome(QueueStatus.LOOP_DISABLED, "Disabled **looping!**")
                player.set_loop(player.LOOP_SINGLE)
            except Exception as exc:
                logger.error("Error looping track in guild %s: %s", session.guild_id, exc)
                return _failed("looping song")
        return QueueOutcome(
            QueueStatus.LOOP_ENABLED,
            "Enabled **looping!** Use **/loop** again to disable or **/skip** to skip",
        )

    async def snapshot(self, guild_id: Optional[int]) -> Optional[QueueSnapshot]:
        """Current and pending track metadata, or ``None`` without a session."""
        session = self._session(guild_id)
        if session is None:
            return None

        async with session.lock:
            player = session.player
            current = track_metadata(player.current) if player.current else None
            return QueueSnapshot(
                current=current,
                position=max(0, player.position or 0) / 1000,
                paused=bool(player.paused),
                looping=player.loop == player.LOOP_SINGLE,
                upcoming=[track_metadata(track) for track in player.queue],
            )
