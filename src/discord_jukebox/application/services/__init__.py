"""
Application Services

Playback controller, idle monitor and queue editing service.
"""

from discord_jukebox.application.services.idle_monitor import IdleMonitor
from discord_jukebox.application.services.playback_controller import PlaybackController
from discord_jukebox.application.services.queue_models import EnqueueOutcome, MoveOutcome
from discord_jukebox.application.services.queue_service import QueueApplicationService

__all__ = [
    "IdleMonitor",
    "PlaybackController",
    "QueueApplicationService",
    "EnqueueOutcome",
    "MoveOutcome",
]
