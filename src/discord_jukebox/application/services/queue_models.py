"""DTOs returned by the playback controller and queue service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import Track
from ...domain.shared.types import NonNegativeInt, PositiveInt


class EnqueueOutcome(BaseModel):
    """Result of appending tracks to a guild queue."""

    model_config = ConfigDict(frozen=True)

    first_position: PositiveInt
    added: NonNegativeInt
    queue_length: NonNegativeInt
    started: bool = False
    now_playing: Track | None = None


class MoveOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    track: Track
    from_position: PositiveInt
    to_position: PositiveInt
