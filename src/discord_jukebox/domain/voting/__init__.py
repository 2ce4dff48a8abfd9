"""
Voting Bounded Context

Domain logic for skip voting.
"""

from discord_jukebox.domain.voting.services import VotingDomainService
from discord_jukebox.domain.voting.value_objects import VoteResult, VoteTally

__all__ = [
    "VoteResult",
    "VoteTally",
    "VotingDomainService",
]
