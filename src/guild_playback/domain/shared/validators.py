"""Shared validators for Discord-specific data such as snowflake IDs."""

from typing import Any

from guild_playback.domain.shared.messages import ErrorMessages


def validate_discord_snowflake(value: int) -> int:
    """Validate a Discord snowflake ID.

    Discord snowflake IDs are 64-bit unsigned integers representing unique
    identifiers for users, guilds, channels, messages, etc.

    Raises:
        ValueError: If the snowflake ID is invalid.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def parse_snowflake_list(value: Any) -> tuple[int, ...]:
    """Coerce a JSON array, tuple or comma-separated string into validated IDs.

    Raises:
        ValueError: If the value has the wrong shape or holds an invalid ID.
    """
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        parts = [p.strip() for p in value.strip("[]").split(",") if p.strip()]
        try:
            value = [int(p) for p in parts]
        except ValueError as e:
            raise ValueError(ErrorMessages.INVALID_SNOWFLAKE_LIST.format(value=value)) from e
    if isinstance(value, int):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE_LIST.format(value=value))
    return tuple(validate_discord_snowflake(int(v)) for v in value)
