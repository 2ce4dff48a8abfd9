"""
Skip Track Command

Command and handler for skipping the current track outright.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ..services.playback_controller import PlaybackController


class SkipTrackCommand(BaseModel):
    """Command to skip the current track.

    ``is_dj`` marks users allowed to skip any track (DJ role holders and bot
    owners). Everyone else may only skip their own requests and should
    use vote-skip instead.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    user_id: DiscordSnowflake
    is_dj: bool = False


class SkipResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    skipped_track: Track


class SkipTrackHandler:
    """Handler for SkipTrackCommand."""

    def __init__(self, *, controller: PlaybackController) -> None:
        self._controller = controller

    async def handle(self, command: SkipTrackCommand) -> SkipResult:
        """Skip the current track.

        Raises:
            NoActiveSessionError: Nothing is playing.
            PermissionDeniedError: The user is neither DJ nor the requester.
        """
        skipped = await self._controller.skip(
            command.guild_id, actor_id=command.user_id, is_privileged=command.is_dj
        )
        return SkipResult(skipped_track=skipped)
