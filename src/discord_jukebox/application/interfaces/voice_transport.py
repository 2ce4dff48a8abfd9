"""Port interface for the voice connection that carries audio."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from discord_jukebox.domain.shared.types import ChannelIdField, DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import Track

VoiceSession = Any
"""Opaque handle to a connected voice session."""

AudioSink = Any
"""Opaque handle to one started stream."""

StreamEndCallback = Callable[[int, AudioSink, Exception | None], Awaitable[None]]


class VoiceTransport(ABC):
    """Interface for voice channel connections and audio streams.

    The stream-end callback fires exactly once per :meth:`start_stream`,
    whether the stream finished, failed or was stopped, and carries the sink
    handle it refers to so stale notifications can be recognised.
    """

    @abstractmethod
    async def connect(self, guild_id: DiscordSnowflake, channel_id: ChannelIdField) -> VoiceSession:
        """Join a voice channel and return the session handle."""
        ...

    @abstractmethod
    async def start_stream(self, session: VoiceSession, track: Track, volume: float) -> AudioSink:
        """Start streaming a track at the given volume.

        Raises:
            StreamUnavailableError: The track's media could not be opened.
        """
        ...

    @abstractmethod
    def set_volume(self, sink: AudioSink, volume: float) -> None:
        ...

    @abstractmethod
    def pause(self, session: VoiceSession) -> None:
        ...

    @abstractmethod
    def resume(self, session: VoiceSession) -> None:
        ...

    @abstractmethod
    def stop(self, session: VoiceSession) -> None:
        """Stop the current stream. Its stream-end callback still fires."""
        ...

    @abstractmethod
    async def destroy(self, session: VoiceSession) -> None:
        """Stop playback and leave the voice channel."""
        ...

    @abstractmethod
    def listener_ids(self, session: VoiceSession) -> set[int]:
        """Ids of the non-bot members in the session's voice channel."""
        ...

    def count_listeners(self, session: VoiceSession) -> int:
        return len(self.listener_ids(session))

    @abstractmethod
    def set_on_stream_end(self, callback: StreamEndCallback) -> None:
        ...
