"""Query for retrieving the currently playing track."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from discord_jukebox.domain.music.entities import Track, format_duration
from discord_jukebox.domain.music.value_objects import PlaybackState
from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.domain.shared.types import DiscordSnowflake, NonNegativeInt

if TYPE_CHECKING:
    from ...domain.music.registry import SessionRegistry


class GetCurrentTrackQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    guild_id: DiscordSnowflake


class CurrentTrackInfo(BaseModel):

    guild_id: DiscordSnowflake
    track: Track | None = None
    is_playing: bool = False
    is_paused: bool = False
    loop: bool = False
    volume: float = 1.0
    elapsed_seconds: NonNegativeInt | None = None
    queue_length: NonNegativeInt = 0

    def render(self) -> str:
        """Now-playing text: title, duration, requester and elapsed time."""
        if self.track is None:
            return DiscordUIMessages.STATE_NOTHING_PLAYING
        track = self.track
        text = DiscordUIMessages.NOW_PLAYING.format(
            title=track.title,
            duration=f" [{track.duration_formatted}]" if track.duration_seconds else "",
            requester_id=track.requested_by_id,
        )
        if self.elapsed_seconds is not None:
            text += DiscordUIMessages.NOW_PLAYING_ELAPSED.format(
                elapsed=format_duration(self.elapsed_seconds)
            )
        return text


class GetCurrentTrackHandler:

    def __init__(self, *, registry: SessionRegistry) -> None:
        self._registry = registry

    async def handle(self, query: GetCurrentTrackQuery) -> CurrentTrackInfo:
        queue = self._registry.get(query.guild_id)

        if queue is None:
            return CurrentTrackInfo(guild_id=query.guild_id)

        return CurrentTrackInfo(
            guild_id=query.guild_id,
            track=queue.current,
            is_playing=queue.state.is_playing,
            is_paused=queue.state == PlaybackState.PAUSED,
            loop=queue.loop,
            volume=queue.volume,
            elapsed_seconds=queue.elapsed_seconds(),
            queue_length=queue.length,
        )
