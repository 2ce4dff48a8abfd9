"""
Music Bounded Context

Domain logic for tracks, guild queues and the session registry.
"""

from discord_jukebox.domain.music.entities import GuildQueue, Track, format_duration
from discord_jukebox.domain.music.registry import SessionRegistry
from discord_jukebox.domain.music.value_objects import PlaybackState, TeardownReason, TrackOrigin

__all__ = [
    # Entities
    "Track",
    "GuildQueue",
    "format_duration",
    # Value Objects
    "TrackOrigin",
    "PlaybackState",
    "TeardownReason",
    # Registry
    "SessionRegistry",
]
