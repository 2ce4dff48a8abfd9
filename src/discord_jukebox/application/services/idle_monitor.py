"""Deferred teardown of guild sessions that sit with nothing to play."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ...domain.music.entities import GuildQueue
from ...domain.shared.constants import TimeConstants
from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

IdleCallback = Callable[[GuildQueue], Awaitable[None]]


class IdleMonitor:
    """Owns the single idle-teardown task a guild queue may carry.

    The task handle lives on ``queue.idle_task``. When the delay elapses the
    registered callback is invoked with the queue; the callback is
    responsible for re-checking that the queue is still registered and
    still empty before destroying it.
    """

    def __init__(self, *, timeout_seconds: float = TimeConstants.IDLE_DISCONNECT_SECONDS) -> None:
        self._timeout = timeout_seconds
        self._on_timeout: IdleCallback | None = None

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def set_on_timeout(self, callback: IdleCallback) -> None:
        self._on_timeout = callback

    def is_scheduled(self, queue: GuildQueue) -> bool:
        task = queue.idle_task
        return task is not None and not task.done()

    def schedule(self, queue: GuildQueue) -> None:
        """Arm the idle timer unless one is already pending."""
        if self.is_scheduled(queue):
            return

        logger.info(LogTemplates.IDLE_SCHEDULED, queue.guild_id, self._timeout)
        queue.idle_task = asyncio.create_task(
            self._expire(queue), name=f"idle-teardown-{queue.guild_id}"
        )

    def cancel(self, queue: GuildQueue) -> None:
        """Detach and cancel the pending timer. A timer that already fired is left alone."""
        task = queue.idle_task
        queue.idle_task = None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        logger.debug(LogTemplates.IDLE_CANCELLED, queue.guild_id)

    async def _expire(self, queue: GuildQueue) -> None:
        try:
            await asyncio.sleep(self._timeout)
        except asyncio.CancelledError:
            return

        if queue.idle_task is not asyncio.current_task():
            return

        logger.info(LogTemplates.IDLE_FIRED, queue.guild_id)
        if self._on_timeout is None:
            return
        try:
            await self._on_timeout(queue)
        except Exception:
            logger.exception(LogTemplates.IDLE_TEARDOWN_FAILED, queue.guild_id)
