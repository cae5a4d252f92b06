"""Pydantic models for the Spotify Web API responses the client reads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from guild_playback.domain.shared.types import NonEmptyStr, PositiveInt


class SpotifyToken(BaseModel):
    """Client-credentials token response."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: NonEmptyStr
    token_type: str = "Bearer"
    expires_in: PositiveInt = 3600


class SpotifyArtist(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""


class SpotifyTrackItem(BaseModel):
    """A catalog track; only the fields needed to build a search query."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    type: str = "track"
    is_local: bool = False
    artists: list[SpotifyArtist] = Field(default_factory=list)

    @property
    def is_searchable(self) -> bool:
        return self.type == "track" and bool(self.name.strip())

    @property
    def query(self) -> str:
        """YouTube search text: ``"<title> <artists>"``."""
        artists = ", ".join(a.name for a in self.artists if a.name)
        return f"{self.name.strip()} {artists}".strip()


class SpotifyPlaylistItem(BaseModel):
    """Playlist entry wrapper; ``track`` is null for removed or unavailable items."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    track: SpotifyTrackItem | None = None


class SpotifyPage(BaseModel):
    """One page of a paginated Spotify listing."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    items: list[dict[str, Any]] = Field(default_factory=list)
    next: str | None = None
    total: int | None = None
