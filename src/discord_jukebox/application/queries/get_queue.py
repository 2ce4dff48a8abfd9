"""Query for retrieving one page of a guild's queue."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.shared.constants import LimitConstants
from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.domain.shared.types import DiscordSnowflake, NonNegativeInt, PageSize, PositiveInt

if TYPE_CHECKING:
    from ...domain.music.registry import SessionRegistry


class GetQueueQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    guild_id: DiscordSnowflake
    page: PositiveInt = 1
    page_size: PageSize = LimitConstants.QUEUE_PAGE_SIZE


class QueueEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    position: PositiveInt
    track: Track

    @property
    def is_current(self) -> bool:
        return self.position == 1

    def render(self) -> str:
        track = self.track
        return DiscordUIMessages.QUEUE_LINE.format(
            position=self.position,
            title=track.title,
            link=track.link,
            now_playing=DiscordUIMessages.QUEUE_NOW_PLAYING_MARK if self.is_current else "",
            duration=f" [{track.duration_formatted}]" if track.duration_seconds else "",
        )


class QueuePage(BaseModel):
    """One page of the queue; ``page`` is 1-based and clamped to the available range."""

    guild_id: DiscordSnowflake
    entries: list[QueueEntry] = Field(default_factory=list)
    page: PositiveInt = 1
    total_pages: PositiveInt = 1
    total_tracks: NonNegativeInt = 0
    total_duration: NonNegativeInt = 0

    @property
    def is_empty(self) -> bool:
        return self.total_tracks == 0

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def render_lines(self) -> str:
        return "\n".join(entry.render() for entry in self.entries)

    @property
    def footer(self) -> str:
        return DiscordUIMessages.EMBED_QUEUE_FOOTER.format(
            page=self.page, total_pages=self.total_pages
        )


class GetQueueHandler:

    def __init__(self, *, registry: SessionRegistry) -> None:
        self._registry = registry

    async def handle(self, query: GetQueueQuery) -> QueuePage:
        queue = self._registry.get(query.guild_id)
        tracks = list(queue.tracks) if queue is not None else []

        if not tracks:
            return QueuePage(guild_id=query.guild_id)

        total_pages = max(1, math.ceil(len(tracks) / query.page_size))
        page = min(query.page, total_pages)
        start = (page - 1) * query.page_size

        entries = [
            QueueEntry(position=start + offset + 1, track=track)
            for offset, track in enumerate(tracks[start : start + query.page_size])
        ]

        return QueuePage(
            guild_id=query.guild_id,
            entries=entries,
            page=page,
            total_pages=total_pages,
            total_tracks=len(tracks),
            total_duration=sum(t.duration_seconds for t in tracks),
        )
