"""Fake ports shared by the test suite."""

import asyncio

from guild_playback.application.interfaces.spotify_catalog import SpotifyCatalog
from guild_playback.application.interfaces.track_resolver import PlaylistExpander, TrackResolver
from guild_playback.domain.music.entities import Track, TrackMetadata
from guild_playback.domain.music.lookup import MetadataLookup
from guild_playback.domain.music.value_objects import LinkKind, TrackVariant
from guild_playback.domain.shared.exceptions import (
    MetadataUnavailableError,
    ResolutionFailedError,
)

# ============================================================================
# Fake adapters
# ============================================================================


class FakeResolver(MetadataLookup, TrackResolver, PlaylistExpander):
    """In-memory stand-in for the yt-dlp resolver.

    Search results are primed with ``title=query`` and a 3:45 duration.
    Links without explicit metadata describe themselves as "Fetched title".
    """

    def __init__(
        self,
        *,
        failing_queries: set[str] | None = None,
        failing_links: set[str] | None = None,
        delays: dict[str, float] | None = None,
        metadata: dict[str, TrackMetadata] | None = None,
        playlist: list[Track] | None = None,
    ) -> None:
        self.failing_queries = failing_queries or set()
        self.failing_links = failing_links or set()
        self.delays = delays or {}
        self.metadata = metadata or {}
        self.playlist = playlist or []
        self.fetch_calls: list[tuple[str, TrackVariant]] = []
        self.resolve_calls: list[tuple[str, TrackVariant]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_metadata(self, link: str, variant: TrackVariant) -> TrackMetadata:
        self.fetch_calls.append((link, variant))
        await asyncio.sleep(0)
        if link in self.failing_links:
            raise MetadataUnavailableError(link, variant.value, reason="unavailable")
        return self.metadata.get(link, TrackMetadata(title="Fetched title", duration_seconds=60))

    async def resolve_query(
        self, query: str, variant: TrackVariant = TrackVariant.YOUTUBE_VOD
    ) -> Track:
        self.resolve_calls.append((query, variant))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(query, 0))
        finally:
            self.in_flight -= 1

        if query in self.failing_queries:
            raise ResolutionFailedError(query)
        track = Track(f"https://www.youtube.com/results?search_query={query.replace(' ', '+')}", variant)
        track.prime(TrackMetadata(title=query, duration_seconds=225))
        return track

    async def expand_playlist(self, url: str) -> list[Track]:
        return list(self.playlist)


class FakeSpotifyCatalog(SpotifyCatalog):
    def __init__(self, queries: list[str] | None = None, error: Exception | None = None) -> None:
        self.queries = queries or []
        self.error = error
        self.calls: list[tuple[str, LinkKind]] = []

    async def queries_for(self, url: str, kind: LinkKind) -> list[str]:
        self.calls.append((url, kind))
        if self.error is not None:
            raise self.error
        return list(self.queries)


def primed_track(title: str, duration: int | None = 180) -> Track:
    """Create a track whose metadata is already known."""
    track = Track(f"https://www.youtube.com/watch?v={title[:11].ljust(11, '0')}")
    track.prime(TrackMetadata(title=title, duration_seconds=duration))
    return track
