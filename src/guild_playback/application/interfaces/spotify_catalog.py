"""Port interface for reading the Spotify catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod

from guild_playback.domain.music.value_objects import LinkKind
from guild_playback.domain.shared.types import NonEmptyStr


class SpotifyCatalog(ABC):
    """Expands Spotify track, album and playlist links into YouTube search queries."""

    @abstractmethod
    async def queries_for(self, url: NonEmptyStr, kind: LinkKind) -> list[str]:
        """Return one ``"<title> <artists>"`` query per catalog entry, in order.

        Raises:
            SpotifyLookupError: If the catalog cannot be read.
        """
        ...

    async def aclose(self) -> None:
        """Release any network resources."""
        return None
