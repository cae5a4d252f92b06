"""Command and handler for the ``/play`` request: links, livestreams and search queries."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from guild_playback.domain.music.entities import Track
from guild_playback.domain.music.links import classify_link, is_youtube_video
from guild_playback.domain.music.value_objects import LinkKind, TrackVariant
from guild_playback.domain.shared.exceptions import (
    DomainError,
    InvalidLinkError,
    MetadataUnavailableError,
    ResolutionFailedError,
)
from guild_playback.domain.shared.messages import DiscordUIMessages, LogTemplates
from guild_playback.domain.shared.types import DiscordSnowflake, NonEmptyStr
from guild_playback.utils.reply import append_line, format_progress

if TYPE_CHECKING:
    from ...domain.music.lookup import MetadataLookup
    from ...domain.music.registry import SessionRegistry
    from ...domain.music.session import GuildSession
    from ..interfaces.spotify_catalog import SpotifyCatalog
    from ..interfaces.track_resolver import PlaylistExpander, TrackResolver
    from ..services.resolution_models import ProgressReport
    from ..services.resolution_pipeline import TrackResolutionPipeline

logger = logging.getLogger(__name__)


class PlayReplyKind(Enum):
    """What a play reply is telling the user."""

    NOW_PLAYING = "now_playing"
    QUEUED = "queued"
    PROGRESS = "progress"
    RESUMED = "resumed"
    ERROR = "error"


class PlayTrackCommand(BaseModel):
    """Request to play a link, a livestream or a search query in a guild."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    channel: Any = None

    link: NonEmptyStr | None = None
    stream: NonEmptyStr | None = None
    query: NonEmptyStr | None = None

    push_to_front: bool = False
    shuffle: bool = False
    requested_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("link", "stream", "query", mode="before")
    @classmethod
    def _strip_input(cls, v: str | None) -> str | None:
        if isinstance(v, str):
            return v.strip() or None
        return v

    @property
    def has_arguments(self) -> bool:
        return any((self.link, self.stream, self.query))


class PlayReply(BaseModel):
    """A reply to show for a play request; later replies replace earlier ones."""

    model_config = ConfigDict(frozen=True, strict=True)

    kind: PlayReplyKind
    description: str
    author: str | None = None
    footer: str | None = None

    @property
    def is_error(self) -> bool:
        return self.kind is PlayReplyKind.ERROR

    def with_line(self, line: str, kind: PlayReplyKind | None = None) -> PlayReply:
        """Copy of this reply with one more line of description."""
        return self.model_copy(
            update={"description": append_line(self.description, line), "kind": kind or self.kind}
        )

    @classmethod
    def error(cls, message: str) -> PlayReply:
        return cls(kind=PlayReplyKind.ERROR, description=message)


PlayResponder = Callable[[PlayReply], Awaitable[None]]


@dataclass
class _PlayOutcome:
    reply: PlayReply
    session: GuildSession | None = None
    pending_queries: list[str] = field(default_factory=list)
    variant: TrackVariant = TrackVariant.YOUTUBE_VOD
    # Reply for the first track only; progress lines are appended beneath it.
    base_reply: PlayReply | None = None


def describe_progress(base: PlayReply, report: ProgressReport) -> PlayReply:
    """Render a batch progress report beneath the first track's reply."""
    if report.completed:
        line = DiscordUIMessages.PROGRESS_DONE.format(queued=report.queued)
        if report.failed:
            line = append_line(line, DiscordUIMessages.PROGRESS_FAILED_SUFFIX.format(failed=report.failed))
    elif report.queued == 0:
        line = DiscordUIMessages.FETCHING_REMAINING.format(count=report.total - report.failed)
    else:
        line = DiscordUIMessages.PROGRESS_PARTIAL.format(
            queued=report.queued, remaining=report.total - report.queued - report.failed
        )
    return base.with_line(line, kind=PlayReplyKind.PROGRESS)


class PlayTrackHandler:
    """Turns a play request into session operations and user-facing replies.

    Batches of search queries (Spotify albums and playlists) queue their
    first match straight away; the rest are resolved in the background and
    reported through the same responder.
    """

    def __init__(
        self,
        *,
        registry: SessionRegistry,
        metadata_lookup: MetadataLookup,
        track_resolver: TrackResolver,
        playlist_expander: PlaylistExpander,
        pipeline: TrackResolutionPipeline,
        spotify_catalog: SpotifyCatalog | None = None,
    ) -> None:
        self._registry = registry
        self._lookup = metadata_lookup
        self._resolver = track_resolver
        self._expander = playlist_expander
        self._pipeline = pipeline
        self._spotify = spotify_catalog

    async def handle(self, command: PlayTrackCommand, respond: PlayResponder) -> PlayReply:
        """Run the request, send its reply, then start any background batch."""
        try:
            outcome = await self._play(command)
        except DomainError as e:
            logger.info(LogTemplates.PLAY_FAILED, command.guild_id, e.code, e.message)
            outcome = _PlayOutcome(reply=PlayReply.error(e.message))

        await respond(outcome.reply)

        if outcome.pending_queries and outcome.session is not None:
            base = outcome.base_reply or outcome.reply

            async def on_progress(report: ProgressReport) -> None:
                await respond(describe_progress(base, report))

            logger.info(LogTemplates.PLAY_BATCH_STARTED, command.guild_id, len(outcome.pending_queries))
            self._pipeline.start(outcome.pending_queries, outcome.session, on_progress, outcome.variant)

        return outcome.reply

    async def _play(self, command: PlayTrackCommand) -> _PlayOutcome:
        session = self._registry.get(command.guild_id)
        if session is not None:
            session.resume()

        if session is None and not command.has_arguments:
            return _PlayOutcome(reply=PlayReply.error(DiscordUIMessages.ERROR_NO_ARGUMENTS))

        if session is None:
            session = self._registry.get_or_create(command.guild_id, command.channel)

        if command.shuffle:
            session.shuffle()

        if command.link:
            return await self._play_link(session, command.link, command.push_to_front)

        if command.stream:
            if not is_youtube_video(command.stream):
                return _PlayOutcome(reply=PlayReply.error(DiscordUIMessages.ERROR_INVALID_YOUTUBE_LINK))
            track = Track(command.stream, TrackVariant.YOUTUBE_LIVESTREAM)
            return await self._enqueue(session, [track], command.push_to_front)

        if command.query:
            track = await self._resolver.resolve_query(command.query)
            return await self._enqueue(session, [track], command.push_to_front)

        return _PlayOutcome(
            reply=PlayReply(kind=PlayReplyKind.RESUMED, description=DiscordUIMessages.RESUMED),
            session=session,
        )

    async def _play_link(self, session: GuildSession, link: str, push_to_front: bool) -> _PlayOutcome:
        kind = classify_link(link)

        if kind is LinkKind.TWITCH_VOD:
            return await self._enqueue(session, [Track(link, TrackVariant.TWITCH_VOD)], push_to_front)

        if kind is LinkKind.YOUTUBE_VIDEO:
            return await self._enqueue(session, [Track(link, TrackVariant.YOUTUBE_VOD)], push_to_front)

        if kind is LinkKind.YOUTUBE_PLAYLIST:
            tracks = await self._expander.expand_playlist(link)
            if not tracks:
                raise ResolutionFailedError(link)
            return await self._enqueue(session, tracks, push_to_front)

        if kind.is_spotify and self._spotify is not None:
            queries = await self._spotify.queries_for(link, kind)
            if not queries:
                raise InvalidLinkError(link)
            if kind is not LinkKind.SPOTIFY_TRACK and len(queries) > 1:
                return await self._enqueue_queries(session, queries)
            track = await self._resolver.resolve_query(queries[0], TrackVariant.SPOTIFY_DERIVED)
            return await self._enqueue(session, [track], push_to_front)

        raise InvalidLinkError(link)

    async def _enqueue_queries(self, session: GuildSession, queries: list[str]) -> _PlayOutcome:
        queries = list(queries)
        if session.shuffled:
            session.shuffle_items(queries)

        first, rest = queries[0], queries[1:]
        try:
            first_track = await self._resolver.resolve_query(first, TrackVariant.SPOTIFY_DERIVED)
        except ResolutionFailedError:
            base = PlayReply(
                kind=PlayReplyKind.QUEUED,
                description=DiscordUIMessages.FIRST_QUERY_NOT_FOUND.format(query=first),
            )
        else:
            base = (await self._enqueue(session, [first_track], False)).reply

        return _PlayOutcome(
            reply=base.with_line(DiscordUIMessages.FETCHING_REMAINING.format(count=len(rest))),
            session=session,
            pending_queries=rest,
            variant=TrackVariant.SPOTIFY_DERIVED,
            base_reply=base,
        )

    async def _enqueue(self, session: GuildSession, tracks: list[Track], push_to_front: bool) -> _PlayOutcome:
        was_playing = session.enqueue(tracks, push_to_front)
        reply = await self._describe_enqueue(session, tracks, push_to_front, was_playing)
        return _PlayOutcome(reply=reply, session=session)

    async def _describe_enqueue(
        self, session: GuildSession, tracks: list[Track], push_to_front: bool, was_playing: bool
    ) -> PlayReply:
        try:
            metadata = await tracks[0].get_metadata(self._lookup)
        except MetadataUnavailableError:
            return PlayReply(kind=PlayReplyKind.QUEUED, description=DiscordUIMessages.METADATA_UNAVAILABLE)

        count = len(tracks)
        if was_playing and count > 1:
            return PlayReply(
                kind=PlayReplyKind.QUEUED,
                description=DiscordUIMessages.QUEUED_MANY.format(count=count),
            )
        if count > 1:
            return PlayReply(
                kind=PlayReplyKind.NOW_PLAYING,
                description=DiscordUIMessages.NOW_PLAYING_WITH_QUEUED.format(
                    title=metadata.title, count=count - 1
                ),
            )
        if was_playing:
            return PlayReply(
                kind=PlayReplyKind.QUEUED,
                description=DiscordUIMessages.QUEUED_AT_POSITION.format(
                    position=session.upcoming_position(push_to_front), title=metadata.title
                ),
            )
        return PlayReply(
            kind=PlayReplyKind.NOW_PLAYING,
            author=DiscordUIMessages.NOW_PLAYING_AUTHOR,
            description=metadata.title,
            footer=format_progress(0, metadata.duration_seconds),
        )
