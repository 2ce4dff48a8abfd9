"""Core domain entities for the music bounded context."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Collection
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from discord_jukebox.domain.music.value_objects import PlaybackState, TrackOrigin
from discord_jukebox.domain.shared.datetime_utils import seconds_since, utcnow
from discord_jukebox.domain.shared.exceptions import InvalidOperationError, UserInputError
from discord_jukebox.domain.shared.messages import ErrorMessages
from discord_jukebox.domain.shared.types import (
    MAX_VOLUME,
    MIN_VOLUME,
    DiscordSnowflake,
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    TrackTitleStr,
    UtcDatetimeField,
    VolumeFloat,
)


def format_duration(seconds: int) -> str:
    """Format seconds as M:SS, with an hour field once past 60 minutes."""
    hours, remainder = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


class Track(BaseModel):
    """Immutable value object representing a playable track."""

    model_config = ConfigDict(frozen=True, strict=True)

    title: TrackTitleStr
    url: NonEmptyStr
    duration_seconds: DurationSeconds = 0
    requested_by_id: DiscordSnowflake
    origin: TrackOrigin = TrackOrigin.NATIVE_VIDEO
    source_url: HttpUrlStr | None = None

    @property
    def duration_formatted(self) -> str:
        """Format duration as M:SS, or "Unknown" for live and unknown lengths."""
        if not self.duration_seconds:
            return "Unknown"
        return format_duration(self.duration_seconds)

    @property
    def link(self) -> str:
        """Canonical link for display, falling back to the playback URL."""
        return self.source_url or self.url

    def was_requested_by(self, user_id: DiscordSnowflake) -> bool:
        return self.requested_by_id == user_id


class GuildQueue(BaseModel):
    """Aggregate root holding the playback queue of a single Discord guild.

    ``tracks[0]`` is the track currently playing (or paused). It only leaves
    the queue through :meth:`advance` or :meth:`jump_to`; every user-facing
    mutation treats position 1 as protected.

    ``voice_session``, ``audio_sink`` and ``idle_task`` are opaque runtime
    handles owned by the playback controller and the idle monitor.
    """

    model_config = ConfigDict(strict=True, arbitrary_types_allowed=True)

    guild_id: DiscordSnowflake
    tracks: list[Track] = Field(default_factory=list)
    volume: VolumeFloat = 1.0
    loop: bool = False
    votes: set[int] = Field(default_factory=set)
    state: PlaybackState = PlaybackState.EMPTY
    started_at: UtcDatetimeField | None = None
    text_channel_id: DiscordSnowflake | None = None
    voice_channel_id: DiscordSnowflake | None = None
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    voice_session: Any = Field(default=None, exclude=True, repr=False)
    audio_sink: Any = Field(default=None, exclude=True, repr=False)
    idle_task: asyncio.Task | None = Field(default=None, exclude=True, repr=False)

    # ── Read accessors ──────────────────────────────────────────────

    @property
    def current(self) -> Track | None:
        return self.tracks[0] if self.tracks else None

    @property
    def length(self) -> int:
        return len(self.tracks)

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    def elapsed_seconds(self, now: datetime | None = None) -> int | None:
        """Seconds since the current stream started, or None when nothing is streaming."""
        if self.started_at is None or self.current is None:
            return None
        return seconds_since(self.started_at, now=now)

    # ── State machine ───────────────────────────────────────────────

    def transition_to(self, new_state: PlaybackState) -> None:
        """Transition to a new playback state."""
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=f"Cannot transition from {self.state.value} to {new_state.value}",
            )
        self.state = new_state

    def mark_playing(self, started_at: datetime | None = None) -> None:
        """Record that the head track has just started streaming."""
        self.transition_to(PlaybackState.PLAYING)
        self.started_at = started_at or utcnow()

    def mark_empty(self) -> None:
        self.transition_to(PlaybackState.EMPTY)
        self.started_at = None
        self.audio_sink = None

    def pause(self) -> None:
        if self.state != PlaybackState.PLAYING:
            raise InvalidOperationError(
                operation="pause", current_state=self.state.value,
                message=ErrorMessages.NOTHING_TO_PAUSE,
            )
        self.transition_to(PlaybackState.PAUSED)

    def resume(self) -> None:
        if self.state != PlaybackState.PAUSED:
            raise InvalidOperationError(
                operation="resume", current_state=self.state.value,
                message=ErrorMessages.NOTHING_TO_RESUME,
            )
        self.transition_to(PlaybackState.PLAYING)

    def discard(self) -> list[Track]:
        """Enter the terminal state, dropping every track and vote."""
        dropped = list(self.tracks)
        self.tracks.clear()
        self.votes.clear()
        self.started_at = None
        self.state = PlaybackState.STOPPED
        return dropped

    # ── Queue mutations ─────────────────────────────────────────────

    def append(self, tracks: list[Track]) -> int:
        """Append tracks in order and return the 1-based position of the first one."""
        first_position = len(self.tracks) + 1
        self.tracks.extend(tracks)
        return first_position

    def advance(self, *, honour_loop: bool = True) -> Track | None:
        """Move past the current track and return the new head.

        With looping enabled (and ``honour_loop`` set) the head stays in place
        so it is replayed. Votes are cleared either way.
        """
        self.votes.clear()
        if not self.tracks:
            return None
        if not (honour_loop and self.loop):
            self.tracks.pop(0)
        return self.current

    def _check_position(self, position: int, message: str) -> None:
        if not 2 <= position <= len(self.tracks):
            raise UserInputError(message, field="position")

    def remove(self, position: int) -> Track:
        """Remove and return the track at a 1-based position other than the first."""
        if len(self.tracks) < 2:
            raise UserInputError(ErrorMessages.NO_TRACKS_TO_REMOVE, field="position")
        self._check_position(
            position, ErrorMessages.INVALID_POSITION.format(position=position, length=len(self.tracks))
        )
        return self.tracks.pop(position - 1)

    def move(self, from_position: int, to_position: int) -> Track:
        """Move a track between 1-based positions, never touching the first one.

        The track is spliced out first and then inserted at ``to_position``
        in the shortened list.
        """
        if len(self.tracks) < 3:
            raise UserInputError(ErrorMessages.NOT_ENOUGH_TRACKS_TO_MOVE, field="from_position")
        message = ErrorMessages.INVALID_MOVE_POSITIONS.format(length=len(self.tracks))
        self._check_position(from_position, message)
        self._check_position(to_position, message)

        track = self.tracks.pop(from_position - 1)
        self.tracks.insert(to_position - 1, track)
        return track

    def jump_to(self, position: int) -> Track:
        """Drop every track before ``position`` so it becomes the head."""
        if len(self.tracks) < 2:
            raise UserInputError(ErrorMessages.NO_TRACKS_TO_JUMP, field="position")
        self._check_position(
            position, ErrorMessages.INVALID_POSITION.format(position=position, length=len(self.tracks))
        )
        del self.tracks[: position - 1]
        self.votes.clear()
        return self.tracks[0]

    def shuffle(self, rng: random.Random | None = None) -> int:
        """Shuffle the upcoming tracks in place and return how many were shuffled."""
        if len(self.tracks) < 2:
            raise UserInputError(ErrorMessages.NOT_ENOUGH_TRACKS_TO_SHUFFLE)
        upcoming = self.tracks[1:]
        (rng or random).shuffle(upcoming)
        self.tracks[1:] = upcoming
        return len(upcoming)

    def clear_upcoming(self) -> int:
        """Drop everything except the current track and return the count removed."""
        removed = len(self.tracks[1:])
        del self.tracks[1:]
        return removed

    def set_volume(self, volume: float) -> float:
        if not MIN_VOLUME <= volume <= MAX_VOLUME:
            raise UserInputError(
                ErrorMessages.INVALID_VOLUME.format(minimum=MIN_VOLUME, maximum=MAX_VOLUME),
                field="volume",
            )
        self.volume = float(volume)
        return self.volume

    def toggle_loop(self) -> bool:
        """Toggle looping of the current track and return the new setting."""
        self.loop = not self.loop
        return self.loop

    def add_vote(self, user_id: int) -> bool:
        """Record a skip vote. Returns False if the user had already voted."""
        if user_id in self.votes:
            return False
        self.votes.add(user_id)
        return True

    def retain_votes(self, user_ids: Collection[int]) -> None:
        """Drop votes from users who are no longer listening."""
        self.votes.intersection_update(user_ids)

    @property
    def vote_count(self) -> int:
        return len(self.votes)
