"""
Application Queries (Read Side)

Query objects and handlers for read operations.
Queries do not modify state, only retrieve data.
"""

from discord_jukebox.application.queries.get_current import (
    CurrentTrackInfo,
    GetCurrentTrackHandler,
    GetCurrentTrackQuery,
)
from discord_jukebox.application.queries.get_queue import (
    GetQueueHandler,
    GetQueueQuery,
    QueueEntry,
    QueuePage,
)

__all__ = [
    "GetQueueQuery",
    "GetQueueHandler",
    "QueueEntry",
    "QueuePage",
    "GetCurrentTrackQuery",
    "GetCurrentTrackHandler",
    "CurrentTrackInfo",
]
