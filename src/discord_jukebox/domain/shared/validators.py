"""Shared validators for Discord-specific values used by settings and commands."""

from __future__ import annotations

from discord_jukebox.domain.shared.messages import ErrorMessages


def validate_discord_snowflake(value: int) -> int:
    """Validate a Discord snowflake ID.

    Discord snowflake IDs are 64-bit unsigned integers representing unique
    identifiers for users, guilds, channels, roles, etc.

    Raises:
        ValueError: If the snowflake ID is invalid.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def validate_optional_snowflake(value: int | None) -> int | None:
    """Like :func:`validate_discord_snowflake` but lets ``None`` (unset) through."""
    if value is None:
        return None
    return validate_discord_snowflake(value)


def parse_snowflake_list(value: object) -> tuple[int, ...]:
    """Normalise a list/tuple/comma-separated string of IDs into a validated tuple."""
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        items: list[object] = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    elif isinstance(value, int):
        items = [value]
    else:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE_LIST)

    ids: list[int] = []
    for item in items:
        try:
            snowflake = int(item)  # type: ignore[call-overload]
        except (TypeError, ValueError) as exc:
            raise ValueError(ErrorMessages.INVALID_SNOWFLAKE_LIST) from exc
        ids.append(validate_discord_snowflake(snowflake))
    return tuple(ids)
