"""Core domain entities for the music bounded context."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from guild_playback.domain.music.value_objects import TrackVariant
from guild_playback.domain.shared.exceptions import MetadataUnavailableError
from guild_playback.domain.shared.messages import ErrorMessages, LogTemplates
from guild_playback.domain.shared.types import (
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    TrackTitleStr,
)
from guild_playback.utils.reply import format_duration

if TYPE_CHECKING:
    from guild_playback.domain.music.lookup import MetadataLookup

logger = logging.getLogger(__name__)


class TrackMetadata(BaseModel):
    """Immutable description of a track as reported by its upstream service."""

    model_config = ConfigDict(frozen=True)

    title: TrackTitleStr
    webpage_url: HttpUrlStr | None = None
    duration_seconds: DurationSeconds | None = None
    thumbnail_url: HttpUrlStr | None = None
    uploader: NonEmptyStr | None = None
    is_live: bool = False

    @property
    def duration_formatted(self) -> str:
        """Format duration as M:SS or H:MM:SS; livestreams have no duration."""
        if self.is_live:
            return "LIVE"
        if self.duration_seconds is None:
            return "Unknown"
        return format_duration(self.duration_seconds)

    @property
    def display_title(self) -> str:
        if self.duration_seconds:
            return f"{self.title} [{self.duration_formatted}]"
        return self.title


class Track:
    """One playable unit: an immutable link and variant plus memoized metadata.

    Tracks compare by identity. Two tracks built from the same link are
    distinct queue entries and each fetches its own metadata at most once.
    """

    __slots__ = ("_link", "_variant", "_metadata", "_lookup")

    def __init__(self, link: str, variant: TrackVariant = TrackVariant.YOUTUBE_VOD) -> None:
        if not link or not link.strip():
            raise ValueError(ErrorMessages.EMPTY_TRACK_LINK)
        self._link = link.strip()
        self._variant = variant
        self._metadata: TrackMetadata | None = None
        self._lookup: asyncio.Future[TrackMetadata] | None = None

    def __repr__(self) -> str:
        return f"Track(link={self._link!r}, variant={self._variant.value})"

    @property
    def link(self) -> str:
        return self._link

    @property
    def variant(self) -> TrackVariant:
        return self._variant

    @property
    def metadata(self) -> TrackMetadata | None:
        """Metadata if it has already been fetched; never triggers a lookup."""
        return self._metadata

    @property
    def has_metadata(self) -> bool:
        return self._metadata is not None

    def prime(self, metadata: TrackMetadata) -> bool:
        """Seed metadata already known from a search result.

        Counts as this track's single fetch. Returns False if a lookup has
        already started or finished.
        """
        if self._metadata is not None or self._lookup is not None:
            return False
        self._metadata = metadata
        return True

    async def get_metadata(self, lookup: MetadataLookup) -> TrackMetadata:
        """Return this track's metadata, fetching it upstream at most once.

        Concurrent callers share the same in-flight lookup. A failure is
        cached and re-raised to every later caller.

        Raises:
            MetadataUnavailableError: If the upstream lookup failed.
        """
        if self._metadata is not None:
            return self._metadata

        if self._lookup is None:
            self._lookup = asyncio.ensure_future(self._fetch(lookup))
            self._lookup.add_done_callback(_mark_retrieved)
        else:
            logger.debug(LogTemplates.METADATA_JOIN_INFLIGHT, self._link)

        # Shielded so one cancelled waiter does not cancel the shared lookup.
        return await asyncio.shield(self._lookup)

    async def _fetch(self, lookup: MetadataLookup) -> TrackMetadata:
        try:
            metadata = await lookup.fetch_metadata(self._link, self._variant)
        except MetadataUnavailableError as e:
            logger.warning(LogTemplates.METADATA_UNAVAILABLE, self._link, self._variant.value, e)
            raise
        except Exception as e:
            logger.warning(LogTemplates.METADATA_UNAVAILABLE, self._link, self._variant.value, e)
            raise MetadataUnavailableError(self._link, self._variant.value, reason=str(e)) from e

        self._metadata = metadata
        logger.debug(LogTemplates.METADATA_FETCHED, self._variant.value, self._link)
        return metadata


def _mark_retrieved(future: asyncio.Future[TrackMetadata]) -> None:
    # Failures are re-raised to callers on demand; retrieving here keeps
    # asyncio from reporting them as never retrieved when nobody is waiting.
    if not future.cancelled():
        future.exception()
