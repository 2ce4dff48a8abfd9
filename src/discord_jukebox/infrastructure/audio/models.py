"""Pydantic models for yt-dlp data transformation and configuration.

These are infrastructure-specific models for parsing external yt-dlp data,
caching extraction results, and configuring yt-dlp options.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discord_jukebox.domain.shared.types import (
    NonEmptyStr,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveInt,
)

CACHE_TTL: Final[int] = 3600
CACHE_MAX_SIZE: Final[int] = 500
DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
LOG_URL_TRUNCATE: Final[int] = 60
MAX_DURATION_SECONDS: Final[int] = 86_400
YOUTUBE_WATCH_URL: Final[str] = "https://www.youtube.com/watch?v={video_id}"


# ── Pydantic models for yt-dlp data ────────────────────────────────────


class AudioFormatInfo(BaseModel):
    """A single audio format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None


class YtDlpTrackInfo(BaseModel):
    """Trimmed yt-dlp extraction result for caching and track conversion.

    Works for full extractions as well as flat playlist/search entries.
    Extra fields from yt-dlp are silently ignored, keeping memory usage low.
    Before-validators coerce garbage from external yt-dlp data gracefully.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: NonEmptyStr | None = None
    webpage_url: NonEmptyStr | None = None
    url: NonEmptyStr | None = None
    title: NonEmptyStr = "Unknown Title"
    duration: NonNegativeInt | None = None
    ie_key: NonEmptyStr | None = None
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator("id", "webpage_url", "url", "ie_key", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        """Convert empty / whitespace-only / non-string values to None."""
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        """Fall back to default when yt-dlp sends empty or non-string title."""
        if not isinstance(v, str) or not v.strip():
            return "Unknown Title"
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        """Coerce to non-negative int; return None for garbage values."""
        if v is None:
            return None
        try:
            val = int(v)
            return val if val >= 0 else None
        except (TypeError, ValueError):
            return None

    @property
    def page_url(self) -> str | None:
        """Canonical page link: the webpage URL, a flat entry's URL, or a rebuilt YouTube link."""
        if self.webpage_url:
            return self.webpage_url
        if self.url and self.url.startswith("http"):
            return self.url
        if self.id and (self.ie_key in (None, "Youtube")):
            return YOUTUBE_WATCH_URL.format(video_id=self.id)
        return None

    @property
    def duration_seconds(self) -> int:
        return min(self.duration or 0, MAX_DURATION_SECONDS)


class CacheEntry(BaseModel):
    """Cached stream URL extraction with its timestamp."""

    model_config = ConfigDict(frozen=True)

    stream_url: NonEmptyStr | None = None
    cached_at: NonNegativeFloat


# ── yt-dlp option models ───────────────────────────────────────────────


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    no_warnings: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    default_search: NonEmptyStr = "ytsearch"
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    format: NonEmptyStr | None = None
    skip_download: bool = True
    extract_flat: NonEmptyStr | bool = False
    playlistend: PositiveInt | None = None

    def to_params(self) -> dict[str, Any]:
        """Options as a YoutubeDL params dict, leaving unset keys out."""
        return self.model_dump(exclude_none=True)
