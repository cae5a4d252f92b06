"""Reusable Pydantic Annotated types for domain-wide validation.

Constrained types are defined here once so models can annotate fields::

    from guild_playback.domain.shared.types import DiscordSnowflake, NonEmptyStr

    class PlayTrackCommand(BaseModel):
        guild_id: DiscordSnowflake
        query: NonEmptyStr | None = None
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""

DurationSeconds = Annotated[int, Field(ge=0)]
"""Track duration in seconds. Twitch VODs can run past a day, so no upper bound."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""


# ── Settings-specific constraints ──────────────────────────────────

ConcurrencyLimit = Annotated[int, Field(ge=1, le=20)]
"""Parallel upstream lookups per resolution batch: 1 … 20."""

ProgressIntervalSeconds = Annotated[float, Field(gt=0.0, le=60.0)]
"""Minimum spacing between progress notifications: (0, 60] seconds."""

SpotifyPageSize = Annotated[int, Field(ge=1, le=50)]
"""Items per Spotify catalog page: 1 … 50."""

