"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class UserInputError(DomainError):
    """Raised for invalid command arguments. Reported verbatim, nothing is mutated."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="USER_INPUT_ERROR")
        self.field = field


class ResolutionError(DomainError):
    """Raised when a query or link could not be turned into tracks."""

    def __init__(self, query: str, message: str, code: str = "RESOLUTION_ERROR") -> None:
        super().__init__(message, code=code)
        self.query = query


class NoResultsError(ResolutionError):
    """The resolver found nothing for the query."""

    def __init__(self, query: str, message: str | None = None) -> None:
        msg = message or f"No results found for '{query}'"
        super().__init__(query, msg, code="NO_RESULTS")


class FetchError(ResolutionError):
    """The resolver failed while fetching a track, playlist or album."""

    def __init__(self, query: str, message: str | None = None) -> None:
        msg = message or f"Error fetching details for '{query}'"
        super().__init__(query, msg, code="FETCH_ERROR")


class StreamUnavailableError(DomainError):
    """Raised by the voice transport when a playback URL cannot be opened."""

    def __init__(self, url: str, message: str | None = None) -> None:
        msg = message or f"Stream unavailable: {url}"
        super().__init__(msg, code="STREAM_UNAVAILABLE")
        self.url = url


class PermissionDeniedError(DomainError):
    """Raised when a user is not allowed to perform an action."""

    def __init__(self, action: str, message: str | None = None) -> None:
        msg = message or f"You do not have permission to {action}."
        super().__init__(msg, code="PERMISSION_DENIED")
        self.action = action


class NoActiveSessionError(DomainError):
    """Raised when a command targets a guild without a live session."""

    def __init__(self, guild_id: int, message: str | None = None) -> None:
        msg = message or "There is no active queue."
        super().__init__(msg, code="NO_ACTIVE_SESSION")
        self.guild_id = guild_id


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class VoiceConnectionError(DomainError):
    """Raised when the bot could not join a voice channel."""

    def __init__(self, channel_id: int, message: str | None = None) -> None:
        msg = message or "I couldn't join your voice channel."
        super().__init__(msg, code="VOICE_CONNECTION_ERROR")
        self.channel_id = channel_id
