"""Command and handler for playing tracks from a query or URL."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from discord_jukebox.application.interfaces.track_resolver import Resolution
from discord_jukebox.application.services.queue_models import EnqueueOutcome
from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.domain.shared.types import DiscordSnowflake, NonEmptyStr

if TYPE_CHECKING:
    from ..interfaces.track_resolver import TrackResolver
    from ..services.playback_controller import PlaybackController


class PlayTrackCommand(BaseModel):
    """Request to resolve a query/URL, queue the result, and start playback if idle."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    voice_channel_id: DiscordSnowflake
    user_id: DiscordSnowflake
    query: NonEmptyStr
    text_channel_id: DiscordSnowflake | None = None

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v


class PlayTrackResult(BaseModel):
    """Result of a play track command."""

    model_config = ConfigDict(frozen=True)

    resolution: Resolution
    outcome: EnqueueOutcome

    @property
    def started_playing(self) -> bool:
        return self.outcome.started

    @property
    def message(self) -> str:
        resolution = self.resolution
        if resolution.is_collection:
            template = (
                DiscordUIMessages.PLAY_NOW_PLAYING_COLLECTION
                if self.outcome.started
                else DiscordUIMessages.PLAY_ADDED_COLLECTION
            )
            text = template.format(
                kind=resolution.collection_kind or "playlist",
                name=resolution.collection_title,
                count=len(resolution.tracks),
            )
        else:
            template = (
                DiscordUIMessages.PLAY_NOW_PLAYING
                if self.outcome.started
                else DiscordUIMessages.PLAY_ADDED
            )
            text = template.format(title=resolution.tracks[0].title)
            if resolution.source_label:
                text += f" ({resolution.source_label})"

        if resolution.failed:
            text += DiscordUIMessages.PLAY_PARTIAL_SUFFIX.format(failed=resolution.failed)
        return text


class PlayTrackHandler:
    """Resolves a query, appends the tracks to the guild queue, and starts playback if needed.

    Resolution happens before any guild lock is taken; the playback
    controller revalidates the session when it appends.
    """

    def __init__(self, *, controller: PlaybackController, track_resolver: TrackResolver) -> None:
        self._controller = controller
        self._resolver = track_resolver

    async def handle(self, command: PlayTrackCommand) -> PlayTrackResult:
        resolution = await self._resolver.resolve(command.query, command.user_id)
        return await self.enqueue(command, resolution)

    async def enqueue(self, command: PlayTrackCommand, resolution: Resolution) -> PlayTrackResult:
        """Append already-resolved tracks, e.g. a search selection."""
        factory = self._controller.session_factory(
            command.guild_id, command.voice_channel_id, command.text_channel_id
        )
        outcome = await self._controller.enqueue(
            command.guild_id, list(resolution.tracks), session_factory=factory
        )
        return PlayTrackResult(resolution=resolution, outcome=outcome)
