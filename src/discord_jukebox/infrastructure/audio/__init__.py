"""Audio infrastructure - yt-dlp and Spotify resolvers."""

from discord_jukebox.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from discord_jukebox.infrastructure.audio.spotify_resolver import SpotifyResolver
from discord_jukebox.infrastructure.audio.track_resolver import MediaTrackResolver
from discord_jukebox.infrastructure.audio.url_classifier import InputType, classify
from discord_jukebox.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "AudioFormatInfo",
    "CacheEntry",
    "InputType",
    "MediaTrackResolver",
    "SpotifyResolver",
    "YtDlpOpts",
    "YtDlpResolver",
    "YtDlpTrackInfo",
    "classify",
]
