"""
Application Commands (Write Side)

Command objects and their handlers for write operations.
Commands represent intent to change the system state.
"""

from discord_jukebox.application.commands.play_track import (
    PlayTrackCommand,
    PlayTrackHandler,
    PlayTrackResult,
)
from discord_jukebox.application.commands.skip_track import (
    SkipResult,
    SkipTrackCommand,
    SkipTrackHandler,
)
from discord_jukebox.application.commands.vote_skip import VoteSkipCommand, VoteSkipHandler

__all__ = [
    # Play
    "PlayTrackCommand",
    "PlayTrackHandler",
    "PlayTrackResult",
    # Skip
    "SkipTrackCommand",
    "SkipTrackHandler",
    "SkipResult",
    # Vote
    "VoteSkipCommand",
    "VoteSkipHandler",
]
