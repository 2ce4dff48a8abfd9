"""In-memory registry of live guild queues."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable

from discord_jukebox.domain.music.entities import GuildQueue
from discord_jukebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Awaitable[GuildQueue]]


class SessionRegistry:
    """Maps guild ids to their live :class:`GuildQueue`.

    A queue is registered exactly while its voice session is connected.
    Every read-modify-write on a queue must happen under :meth:`lock`;
    callers that suspend (network, voice) must re-check :meth:`get` after
    reacquiring it, because the queue may have been torn down meanwhile.
    """

    def __init__(self) -> None:
        self._queues: dict[int, GuildQueue] = {}
        self._locks: dict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    def lock(self, guild_id: int) -> asyncio.Lock:
        """Per-guild mutual exclusion. The same lock object is returned for the process lifetime."""
        return self._locks[guild_id]

    def get(self, guild_id: int) -> GuildQueue | None:
        return self._queues.get(guild_id)

    async def get_or_create(self, guild_id: int, session_factory: SessionFactory) -> GuildQueue:
        """Return the guild's queue, creating it with ``session_factory`` if absent.

        Creation runs under the guild lock, so concurrent callers for the same
        guild share one session. If the factory raises, nothing is registered.
        """
        async with self.lock(guild_id):
            queue = self._queues.get(guild_id)
            if queue is not None:
                return queue

            queue = await session_factory()
            self._queues[guild_id] = queue
            logger.info(LogTemplates.SESSION_CREATED, guild_id)
            return queue

    def remove(self, guild_id: int) -> GuildQueue | None:
        return self._queues.pop(guild_id, None)

    def guild_ids(self) -> list[int]:
        return list(self._queues)

    def __len__(self) -> int:
        return len(self._queues)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._queues
