"""
Shared Domain Kernel

Contains types, messages and exceptions shared across all bounded contexts.
"""

from discord_jukebox.domain.shared.exceptions import (
    DomainError,
    FetchError,
    InvalidOperationError,
    NoActiveSessionError,
    NoResultsError,
    PermissionDeniedError,
    ResolutionError,
    StreamUnavailableError,
    UserInputError,
    VoiceConnectionError,
)

__all__ = [
    "DomainError",
    "UserInputError",
    "ResolutionError",
    "NoResultsError",
    "FetchError",
    "StreamUnavailableError",
    "PermissionDeniedError",
    "NoActiveSessionError",
    "InvalidOperationError",
    "VoiceConnectionError",
]
