"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from discord_jukebox.application.interfaces.track_resolver import Resolution, TrackResolver
from discord_jukebox.application.interfaces.voice_transport import VoiceTransport

__all__ = [
    "Resolution",
    "TrackResolver",
    "VoiceTransport",
]
