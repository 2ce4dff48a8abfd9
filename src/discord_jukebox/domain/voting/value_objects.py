"""
Voting Domain Value Objects

Immutable value objects for the voting bounded context.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.domain.shared.types import NonNegativeInt, PositiveInt


class VoteResult(Enum):
    """Results of attempting to cast a skip vote."""

    # Successful outcomes
    VOTE_RECORDED = "vote_recorded"  # Vote was counted
    THRESHOLD_MET = "threshold_met"  # Vote hit threshold, track skipped
    PRIVILEGED_SKIP = "privileged_skip"  # Requester or DJ skipped outright

    # Vote not counted
    ALREADY_VOTED = "already_voted"
    NOT_IN_CHANNEL = "not_in_channel"  # Voter is not listening in the bot's channel

    @property
    def action_executed(self) -> bool:
        """Check if this result means the current track was skipped."""
        return self in {VoteResult.THRESHOLD_MET, VoteResult.PRIVILEGED_SKIP}

    def get_message(self, votes: int = 0, needed: int = 0) -> str:
        """Get a user-friendly message for this result."""
        messages = {
            VoteResult.VOTE_RECORDED: DiscordUIMessages.VOTE_RECORDED,
            VoteResult.THRESHOLD_MET: DiscordUIMessages.VOTE_THRESHOLD_MET,
            VoteResult.PRIVILEGED_SKIP: DiscordUIMessages.SKIP_DONE,
            VoteResult.ALREADY_VOTED: DiscordUIMessages.VOTE_ALREADY_VOTED,
            VoteResult.NOT_IN_CHANNEL: DiscordUIMessages.VOTE_NOT_IN_CHANNEL,
        }
        return messages[self].format(votes=votes, threshold=needed)


class VoteTally(BaseModel):
    """Outcome of one vote: what happened and where the count stands."""

    model_config = ConfigDict(frozen=True, strict=True)

    result: VoteResult
    votes: NonNegativeInt
    threshold: PositiveInt

    @property
    def skipped(self) -> bool:
        return self.result.action_executed

    @property
    def message(self) -> str:
        return self.result.get_message(votes=self.votes, needed=self.threshold)
