"""Centralized constants shared by the audio adapters and the session lifecycle."""

from __future__ import annotations


class ConfigKeys:
    """Environment variable names read outside of pydantic-settings."""

    LOG_LEVEL = "LOG_LEVEL"
    NO_COLOR = "NO_COLOR"


class AudioConstants:
    """FFmpeg / yt-dlp defaults."""

    FFMPEG_BEFORE_OPTIONS_DEFAULT = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    FFMPEG_OPTIONS_DEFAULT = "-vn"  # No video
    FFMPEG_USER_AGENT_HEADER = '-headers "User-Agent: {user_agent}"'

    # Matches yt-dlp's Android client user-agent to avoid YouTube 403 responses
    ANDROID_USER_AGENT = "com.google.android.youtube/19.44.38 (Linux; U; Android 14) gzip"

    YTDLP_FORMAT_DEFAULT = "bestaudio/best"
    DEFAULT_VOLUME = 1.0


class TimeConstants:
    """Timeouts and delays, in seconds."""

    VOICE_CONNECT_TIMEOUT = 10.0
    IDLE_DISCONNECT_SECONDS = 60.0
    SEARCH_SELECT_TIMEOUT = 15.0
    QUEUE_PAGINATION_TIMEOUT = 60.0
    INFO_CACHE_TTL = 3600


class LimitConstants:
    """Validation boundaries and list sizes."""

    PLAYLIST_LIMIT = 50
    SEARCH_RESULTS = 5
    QUEUE_PAGE_SIZE = 10
    SELECT_LABEL_MAX = 100
    MAX_DISCORD_SNOWFLAKE = 2**64
