"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across bounded contexts is defined here once,
so models can simply annotate their fields::

    from discord_jukebox.domain.shared.types import DiscordSnowflake, NonEmptyStr

    class MyModel(BaseModel):
        guild_id: DiscordSnowflake
        name: NonEmptyStr
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""

MIN_VOLUME: float = 0.0
MAX_VOLUME: float = 5.0

VolumeFloat = Annotated[float, Field(ge=MIN_VOLUME, le=MAX_VOLUME)]
"""Audio volume multiplier in [0.0, 5.0]."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""


# ── Domain-specific numeric constraints ─────────────────────────────

DurationSeconds = Annotated[int, Field(ge=0, le=86_400)]
"""Track duration in seconds: 0 … 86 400. Zero means unknown."""


# ── Settings-specific constraints ──────────────────────────────────

TimeoutSeconds = Annotated[float, Field(gt=0.0, le=3600.0)]
"""Positive timeout in seconds, at most one hour."""

PageSize = Annotated[int, Field(ge=1, le=25)]
"""Items per embed page: 1 … 25 (Discord's field limit)."""

PlaylistLimit = Annotated[int, Field(ge=1, le=500)]
"""Maximum entries taken from a playlist: 1 … 500."""

SearchLimit = Annotated[int, Field(ge=1, le=25)]
"""Search results offered in a select menu: 1 … 25."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""


# ── Pydantic-compatible ID aliases ──────────────────────────────────

ChannelIdField = DiscordSnowflake
"""Discord channel id."""
