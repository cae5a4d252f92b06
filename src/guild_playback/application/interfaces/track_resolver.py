"""Port interfaces for turning search queries and playlist links into tracks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from guild_playback.domain.music.value_objects import TrackVariant
from guild_playback.domain.shared.types import HttpUrlStr, NonEmptyStr

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class TrackResolver(ABC):
    """Interface for resolving free-text search queries to playable tracks."""

    @abstractmethod
    async def resolve_query(
        self, query: NonEmptyStr, variant: TrackVariant = TrackVariant.YOUTUBE_VOD
    ) -> "Track":
        """Resolve a query to its best match.

        Raises:
            ResolutionFailedError: If nothing matches the query.
        """
        ...


class PlaylistExpander(ABC):
    """Interface for expanding a playlist URL into its tracks."""

    @abstractmethod
    async def expand_playlist(self, url: HttpUrlStr) -> list["Track"]:
        """Extract every playable entry of a playlist, in playlist order."""
        ...
