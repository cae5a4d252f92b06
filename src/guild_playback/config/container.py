"""Dependency Injection Container

Builds the playback object graph lazily: the session registry, the yt-dlp
resolver, the optional Spotify client, the resolution pipeline and the play
handler. Components are created on first access and cached for reuse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.commands.play_track import PlayTrackHandler
    from ..application.services.resolution_pipeline import TrackResolutionPipeline
    from ..domain.music.registry import SessionRegistry
    from ..infrastructure.audio.ytdlp_resolver import YtDlpTrackResolver
    from ..infrastructure.spotify.client import SpotifyClient
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    The yt-dlp resolver serves three ports at once (metadata lookup, search
    and playlist expansion), so a single instance backs all of them.
    """

    settings: Settings
    _bot: Bot | None = None

    _session_registry: SessionRegistry | None = None
    _ytdlp_resolver: YtDlpTrackResolver | None = None
    _spotify_client: SpotifyClient | None = None
    _resolution_pipeline: TrackResolutionPipeline | None = None
    _play_track_handler: PlayTrackHandler | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Domain ===

    @property
    def session_registry(self) -> SessionRegistry:
        if self._session_registry is None:
            from ..domain.music.registry import SessionRegistry

            self._session_registry = SessionRegistry()
        return self._session_registry

    # === Infrastructure adapters ===

    @property
    def ytdlp_resolver(self) -> YtDlpTrackResolver:
        if self._ytdlp_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpTrackResolver

            self._ytdlp_resolver = YtDlpTrackResolver(self.settings.resolution)
        return self._ytdlp_resolver

    @property
    def spotify_client(self) -> SpotifyClient | None:
        """Spotify client, or None when no client credentials are configured."""
        if self._spotify_client is None and self.settings.spotify.is_configured:
            from ..infrastructure.spotify.client import SpotifyClient

            self._spotify_client = SpotifyClient(self.settings.spotify)
        return self._spotify_client

    # === Application services ===

    @property
    def resolution_pipeline(self) -> TrackResolutionPipeline:
        if self._resolution_pipeline is None:
            from ..application.services.resolution_pipeline import TrackResolutionPipeline

            self._resolution_pipeline = TrackResolutionPipeline(
                resolver=self.ytdlp_resolver,
                registry=self.session_registry,
                max_concurrency=self.settings.resolution.max_concurrency,
                progress_interval=self.settings.progress.interval_seconds,
            )
        return self._resolution_pipeline

    # === Command handlers ===

    @property
    def play_track_handler(self) -> PlayTrackHandler:
        if self._play_track_handler is None:
            from ..application.commands.play_track import PlayTrackHandler

            resolver = self.ytdlp_resolver
            self._play_track_handler = PlayTrackHandler(
                registry=self.session_registry,
                metadata_lookup=resolver,
                track_resolver=resolver,
                playlist_expander=resolver,
                pipeline=self.resolution_pipeline,
                spotify_catalog=self.spotify_client,
            )
        return self._play_track_handler

    # === Lifecycle ===

    async def shutdown(self) -> int:
        """Close every session and release network clients; returns the sessions closed."""
        closed = 0
        if self._session_registry is not None:
            closed = self._session_registry.clear()

        if self._spotify_client is not None:
            try:
                await self._spotify_client.aclose()
            except Exception as exc:
                logger.warning(LogTemplates.SPOTIFY_CLOSE_FAILED, exc)
            self._spotify_client = None
        return closed


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
