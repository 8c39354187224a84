"""Delayed auto-disconnect once a guild's queue runs dry."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional

from poorjimmy.services.session_service import SessionRegistry

logger = logging.getLogger(__name__)

LeaveCallback = Callable[[int], Awaitable[object]]
NotifyCallback = Callable[[int, Optional[int]], Awaitable[None]]


class DisconnectState(Enum):
    ACTIVE = "active"
    ARMED = "armed"
    DISCONNECTED = "disconnected"


class AutoDisconnectCoordinator:
    """Arm one countdown per guild and leave voice if it runs out.

    A countdown is cancelled as soon as playback resumes. The queue is
    checked again at expiry, so a countdown that outlives new activity
    still does nothing.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        *,
        delay: float,
        leave: LeaveCallback,
        notify: NotifyCallback,
    ) -> None:
        self.registry = registry
        self.delay = max(0.0, delay)
        self._leave = leave
        self._notify = notify
        self._timers: Dict[int, asyncio.Task] = {}
        self._states: Dict[int, DisconnectState] = {}

    def state(self, guild_id: int) -> DisconnectState:
        return self._states.get(guild_id, DisconnectState.ACTIVE)

    def is_armed(self, guild_id: int) -> bool:
        task = self._timers.get(guild_id)
        return task is not None and not task.done()

    def arm(self, guild_id: int) -> None:
        """Start (or restart) the countdown for ``guild_id``."""
        self._cancel_task(guild_id)
        self._states[guild_id] = DisconnectState.ARMED
        self._timers[guild_id] = asyncio.create_task(
            self._countdown(guild_id), name=f"auto-disconnect-{guild_id}"
        )
        logger.debug("Armed auto-disconnect for guild %s (%.0fs)", guild_id, self.delay)

    def cancel(self, guild_id: int) -> bool:
        """Disarm after new activity; returns whether a countdown was pending."""
        cancelled = self._cancel_task(guild_id)
        if self._states.get(guild_id) is DisconnectState.ARMED:
            self._states[guild_id] = DisconnectState.ACTIVE
        if cancelled:
            logger.debug("Cancelled auto-disconnect for guild %s", guild_id)
        return cancelled

    def reset(self, guild_id: int) -> None:
        """A new session starts out active."""
        self._cancel_task(guild_id)
        self._states[guild_id] = DisconnectState.ACTIVE

    def forget(self, guild_id: int) -> None:
        """Drop all state for a guild whose session ended some other way."""
        self._cancel_task(guild_id)
        self._states.pop(guild_id, None)

    async def close(self) -> None:
        tasks = list(self._timers.values())
        self._timers.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _cancel_task(self, guild_id: int) -> bool:
        task = self._timers.pop(guild_id, None)
        if task is None or task.done():
            return False
        if task is asyncio.current_task():
            return False
        task.cancel()
        return True

    async def _countdown(self, guild_id: int) -> None:
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            return
        # From here on the disconnect runs to completion.
        self._timers.pop(guild_id, None)
        await self._expire(guild_id)

    async def _expire(self, guild_id: int) -> None:
        session = self.registry.get(guild_id)
        if session is not None and not session.is_idle:
            logger.info("Queue for guild %s refilled before auto-disconnect; staying.", guild_id)
            self._states[guild_id] = DisconnectState.ACTIVE
            return

        text_channel_id = session.text_channel_id if session else None
        self._states[guild_id] = DisconnectState.DISCONNECTED
        try:
            await self._leave(guild_id)
        except Exception as exc:
            logger.error("Auto-disconnect failed to leave guild %s: %s", guild_id, exc)
            return

        logger.info("Left guild %s after %.0fs of inactivity", guild_id, self.delay)
        if session is None:
            return
        try:
            await self._notify(guild_id, text_channel_id)
        except Exception as exc:
            logger.error("Failed to post inactivity notice for guild %s: %s", guild_id, exc)
