"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum


class TrackOrigin(Enum):
    """Where a track was resolved from."""

    NATIVE_VIDEO = "native_video"
    EXTERNAL_SERVICE = "external_service"


class PlaybackState(Enum):
    """Playback state with enforced transitions.

    State transitions:
    - EMPTY -> PLAYING (first enqueue)
    - PLAYING -> PLAYING (next track, loop replay)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (resume, skip, jump)
    - PLAYING/PAUSED -> EMPTY (nothing left to play)
    - Any -> STOPPED (stop, idle timeout, empty room, disconnect)

    STOPPED is terminal: the queue is discarded with it.
    """

    EMPTY = "empty"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            PlaybackState.EMPTY: {PlaybackState.PLAYING, PlaybackState.STOPPED},
            PlaybackState.PLAYING: {
                PlaybackState.PLAYING,
                PlaybackState.PAUSED,
                PlaybackState.EMPTY,
                PlaybackState.STOPPED,
            },
            PlaybackState.PAUSED: {
                PlaybackState.PLAYING,
                PlaybackState.EMPTY,
                PlaybackState.STOPPED,
            },
            PlaybackState.STOPPED: set(),
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {PlaybackState.PLAYING, PlaybackState.PAUSED}

    @property
    def is_playing(self) -> bool:
        return self == PlaybackState.PLAYING


class TeardownReason(Enum):
    """Reasons a guild session can be destroyed."""

    STOPPED = "stopped"
    IDLE_TIMEOUT = "idle_timeout"
    ROOM_EMPTY = "room_empty"
    DISCONNECTED = "disconnected"
    GUILD_REMOVED = "guild_removed"
    SHUTDOWN = "shutdown"

    @property
    def requires_empty_queue(self) -> bool:
        """Idle teardown only proceeds if nothing was queued in the meantime."""
        return self == TeardownReason.IDLE_TIMEOUT
