"""Discord cogs - command handlers."""

from discord_jukebox.infrastructure.discord.cogs.admin_cog import AdminCog
from discord_jukebox.infrastructure.discord.cogs.event_cog import EventCog
from discord_jukebox.infrastructure.discord.cogs.music_cog import MusicCog
from discord_jukebox.infrastructure.discord.cogs.playback_cog import PlaybackCog
from discord_jukebox.infrastructure.discord.cogs.queue_cog import QueueCog

__all__ = [
    "MusicCog",
    "PlaybackCog",
    "QueueCog",
    "AdminCog",
    "EventCog",
]
