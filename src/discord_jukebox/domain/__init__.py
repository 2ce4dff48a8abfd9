# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, messages and exceptions
- music/: Track, guild queue and session registry
- voting/: Skip-vote rules
"""

from discord_jukebox.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
