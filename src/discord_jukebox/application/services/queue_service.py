"""Queue Application Service - position-based edits of a guild's upcoming tracks."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from ...domain.music.entities import GuildQueue, Track
from ...domain.shared.exceptions import NoActiveSessionError
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake
from .queue_models import MoveOutcome

if TYPE_CHECKING:
    from ...domain.music.registry import SessionRegistry

logger = logging.getLogger(__name__)


class QueueApplicationService:
    """Remove, move, shuffle and clear upcoming tracks.

    Positions are 1-based as shown to users. Position 1 (the current track)
    is never touched here; invalid positions raise ``UserInputError`` and
    leave the queue unchanged.
    """

    def __init__(self, *, registry: SessionRegistry, rng: random.Random | None = None) -> None:
        self._registry = registry
        self._rng = rng

    def _require_queue(self, guild_id: int) -> GuildQueue:
        queue = self._registry.get(guild_id)
        if queue is None:
            raise NoActiveSessionError(guild_id)
        return queue

    async def remove(self, guild_id: DiscordSnowflake, position: int) -> Track:
        async with self._registry.lock(guild_id):
            queue = self._require_queue(guild_id)
            removed = queue.remove(position)
        logger.info(LogTemplates.QUEUE_REMOVED, removed.title, position, guild_id)
        return removed

    async def move(
        self, guild_id: DiscordSnowflake, from_position: int, to_position: int
    ) -> MoveOutcome:
        async with self._registry.lock(guild_id):
            queue = self._require_queue(guild_id)
            moved = queue.move(from_position, to_position)
        logger.info(LogTemplates.QUEUE_MOVED, moved.title, from_position, to_position, guild_id)
        return MoveOutcome(track=moved, from_position=from_position, to_position=to_position)

    async def shuffle(self, guild_id: DiscordSnowflake) -> int:
        async with self._registry.lock(guild_id):
            queue = self._require_queue(guild_id)
            count = queue.shuffle(self._rng)
        logger.info(LogTemplates.QUEUE_SHUFFLED, count, guild_id)
        return count

    async def clear(self, guild_id: DiscordSnowflake) -> int:
        async with self._registry.lock(guild_id):
            queue = self._require_queue(guild_id)
            removed = queue.clear_upcoming()
        logger.info(LogTemplates.QUEUE_CLEARED, removed, guild_id)
        return removed
