"""
Vote Skip Command

Command and handler for voting to skip the current track.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from discord_jukebox.domain.shared.types import DiscordSnowflake
from discord_jukebox.domain.voting.value_objects import VoteTally

if TYPE_CHECKING:
    from ..services.playback_controller import PlaybackController


class VoteSkipCommand(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    user_id: DiscordSnowflake
    is_dj: bool = False


class VoteSkipHandler:
    """Handler for VoteSkipCommand.

    Requesters of the current track and DJs skip immediately; everybody else
    adds a vote, and the track is skipped once half of the non-bot listeners
    (rounded up) have voted.
    """

    def __init__(self, *, controller: PlaybackController) -> None:
        self._controller = controller

    async def handle(self, command: VoteSkipCommand) -> VoteTally:
        return await self._controller.vote_skip(
            command.guild_id, command.user_id, is_privileged=command.is_dj
        )
