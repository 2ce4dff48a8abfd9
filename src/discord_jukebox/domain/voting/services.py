"""
Voting Domain Services

Domain services containing voting business logic.
"""

from __future__ import annotations

import math
from collections.abc import Collection
from typing import TYPE_CHECKING

from discord_jukebox.domain.voting.value_objects import VoteResult, VoteTally

if TYPE_CHECKING:
    from ..music.entities import GuildQueue


class VotingDomainService:
    """Domain service for skip-vote business rules.

    Votes live on the guild queue and are cleared whenever the current track
    changes, so a tally never carries over to the next song.
    """

    MINIMUM_THRESHOLD = 1

    @classmethod
    def calculate_threshold(cls, listener_count: int) -> int:
        """Votes needed to skip: half the listeners, rounded up.

        Args:
            listener_count: Non-bot members in the voice channel. Counts
                below one are treated as one.
        """
        return max(cls.MINIMUM_THRESHOLD, math.ceil(max(listener_count, 1) / 2))

    @classmethod
    def register_vote(
        cls,
        queue: GuildQueue,
        voter_id: int,
        *,
        is_privileged: bool,
        listeners: Collection[int],
    ) -> VoteTally:
        """Evaluate a skip vote against the queue's current track.

        ``listeners`` are the ids of the non-bot members in the bot's voice
        channel. Votes from anyone outside it are rejected, and votes left
        behind by members who have since gone are dropped before counting.

        Privileged voters skip outright. Everybody else adds at most one vote
        per track; the caller is expected to skip when the returned tally
        reports ``skipped``.
        """
        threshold = cls.calculate_threshold(len(listeners))
        queue.retain_votes(listeners)

        if voter_id not in listeners:
            return VoteTally(
                result=VoteResult.NOT_IN_CHANNEL, votes=queue.vote_count, threshold=threshold
            )

        if is_privileged:
            return VoteTally(
                result=VoteResult.PRIVILEGED_SKIP, votes=queue.vote_count, threshold=threshold
            )

        if not queue.add_vote(voter_id):
            return VoteTally(
                result=VoteResult.ALREADY_VOTED, votes=queue.vote_count, threshold=threshold
            )

        if queue.vote_count >= threshold:
            return VoteTally(
                result=VoteResult.THRESHOLD_MET, votes=queue.vote_count, threshold=threshold
            )

        return VoteTally(
            result=VoteResult.VOTE_RECORDED, votes=queue.vote_count, threshold=threshold
        )
