"""
Metadata Lookup Interface

Abstract contract for the per-variant upstream services that describe a
track. Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from guild_playback.domain.music.entities import TrackMetadata
    from guild_playback.domain.music.value_objects import TrackVariant


class MetadataLookup(ABC):
    """Fetches title/duration details for one playable link."""

    @abstractmethod
    async def fetch_metadata(self, link: str, variant: "TrackVariant") -> "TrackMetadata":
        """Look up metadata for a link.

        Args:
            link: The track's source URL.
            variant: Decides which upstream service and options are used.

        Returns:
            The track's metadata.

        Raises:
            MetadataUnavailableError: If the upstream cannot describe the link.
        """
        ...
