"""Metadata lookup, search and playlist expansion on top of yt-dlp."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Any, cast

from yt_dlp import YoutubeDL

from guild_playback.application.interfaces.track_resolver import PlaylistExpander, TrackResolver
from guild_playback.config.settings import ResolutionSettings
from guild_playback.domain.music.entities import Track, TrackMetadata
from guild_playback.domain.music.lookup import MetadataLookup
from guild_playback.domain.music.value_objects import TrackVariant
from guild_playback.domain.shared.exceptions import MetadataUnavailableError, ResolutionFailedError
from guild_playback.domain.shared.messages import LogTemplates
from guild_playback.infrastructure.audio.models import (
    DEFAULT_FORMAT,
    LOG_URL_TRUNCATE,
    CacheEntry,
    ExtractorArgs,
    PotProviderConfig,
    YtDlpOpts,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 500

# ── Module-level state ─────────────────────────────────────────────────

# Shared by every resolver instance, keyed by "<variant>:<link>".
# Worker threads read and write it concurrently; hold _cache_lock for every access.
_info_cache: dict[str, CacheEntry] = {}
_cache_lock = threading.Lock()


def _cache_key(link: str, variant: TrackVariant) -> str:
    return f"{variant.value}:{link}"


class YtDlpTrackResolver(MetadataLookup, TrackResolver, PlaylistExpander):
    """Looks up track metadata, runs YouTube searches and expands playlists.

    yt-dlp is blocking, so every extraction runs in a worker thread.
    """

    def __init__(self, settings: ResolutionSettings | None = None) -> None:
        self._settings = settings or ResolutionSettings()
        self._format = self._settings.ytdlp_format or DEFAULT_FORMAT
        self._cache_ttl = self._settings.metadata_cache_ttl_seconds
        self._cache_max_size = self._settings.metadata_cache_max_size

        self._extractor_args: ExtractorArgs | None = None
        if self._settings.pot_server_url:
            self._extractor_args = ExtractorArgs(
                pot_provider=PotProviderConfig(base_url=[self._settings.pot_server_url])
            )
            logger.info(LogTemplates.YTDLP_POT_CONFIGURED, self._settings.pot_server_url)

        self._base_opts = YtDlpOpts(
            format=self._format,
            socket_timeout=self._settings.socket_timeout_s,
            extractor_args=self._extractor_args,
        )

    # ── Options ────────────────────────────────────────────────────────

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _opts_for(self, variant: TrackVariant) -> YtDlpOpts:
        if variant is TrackVariant.YOUTUBE_LIVESTREAM:
            # Live manifests do not offer the VOD audio-only formats.
            return self._get_opts(format=None)
        if variant is TrackVariant.TWITCH_VOD:
            return self._get_opts(extractor_args=None)
        return self._get_opts()

    def _get_search_opts(self) -> YtDlpOpts:
        return self._get_opts(extract_flat="in_playlist")

    def _get_playlist_opts(self) -> YtDlpOpts:
        return self._get_opts(noplaylist=False, extract_flat="in_playlist")

    # ── Conversion ─────────────────────────────────────────────────────

    @staticmethod
    def _parse_info(data: dict[str, Any]) -> YtDlpTrackInfo:
        return YtDlpTrackInfo.model_validate(data)

    @staticmethod
    def _info_to_metadata(info: YtDlpTrackInfo, variant: TrackVariant) -> TrackMetadata:
        is_live = variant.is_live or info.is_live
        return TrackMetadata(
            title=info.title[:TITLE_MAX_LENGTH],
            webpage_url=info.link,
            duration_seconds=None if is_live else info.duration,
            thumbnail_url=info.thumbnail,
            uploader=info.uploader or info.channel,
            is_live=is_live,
        )

    def _info_to_track(self, info: YtDlpTrackInfo, variant: TrackVariant) -> Track | None:
        link = info.link
        if not link or info.is_unavailable:
            return None
        track = Track(link, variant)
        track.prime(self._info_to_metadata(info, variant))
        return track

    # ── Blocking extraction (worker thread) ────────────────────────────

    def _extract_info_sync(self, link: str, variant: TrackVariant) -> YtDlpTrackInfo | None:
        now = time.time()
        key = _cache_key(link, variant)
        with _cache_lock:
            cached = _info_cache.get(key)
            if cached is not None:
                if now - cached.cached_at < self._cache_ttl:
                    logger.debug(LogTemplates.METADATA_CACHE_HIT, link[:LOG_URL_TRUNCATE])
                    return cached.info
                _info_cache.pop(key, None)

        try:
            with YoutubeDL(params=cast(Any, self._opts_for(variant).to_params())) as ydl:
                data = ydl.extract_info(link, download=False)
            result = self._parse_info(dict(data)) if isinstance(data, dict) else None
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, link)
            return None

        with _cache_lock:
            _info_cache[key] = CacheEntry(info=result, cached_at=now)
            self._prune_cache(now)
        return result

    def _prune_cache(self, now: float) -> None:
        """Drop expired entries, then the oldest ones over the size limit.

        Callers must hold ``_cache_lock``.
        """
        if len(_info_cache) <= self._cache_max_size:
            return

        expired = [k for k, entry in _info_cache.items() if now - entry.cached_at >= self._cache_ttl]
        for k in expired:
            _info_cache.pop(k, None)

        overflow = len(_info_cache) - self._cache_max_size
        if overflow > 0:
            oldest = sorted(_info_cache, key=lambda k: _info_cache[k].cached_at)[:overflow]
            for k in oldest:
                _info_cache.pop(k, None)

        removed = len(expired) + max(overflow, 0)
        if removed:
            logger.debug(LogTemplates.METADATA_CACHE_PRUNED, removed)

    def _search_sync(self, query: str, limit: int = 1) -> list[YtDlpTrackInfo]:
        try:
            with YoutubeDL(params=cast(Any, self._get_search_opts().to_params())) as ydl:
                data = ydl.extract_info(f"ytsearch{limit}:{query}", download=False)
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_SEARCH, query)
            return []
        return self._entries(data)

    def _extract_playlist_sync(self, url: str) -> list[YtDlpTrackInfo]:
        try:
            with YoutubeDL(params=cast(Any, self._get_playlist_opts().to_params())) as ydl:
                data = ydl.extract_info(url, download=False)
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url)
            return []
        return self._entries(data)

    def _entries(self, data: Any) -> list[YtDlpTrackInfo]:
        if not isinstance(data, dict):
            return []
        entries = data.get("entries") or []
        return [self._parse_info(dict(e)) for e in entries if isinstance(e, dict)]

    # ── Ports ──────────────────────────────────────────────────────────

    async def fetch_metadata(self, link: str, variant: TrackVariant) -> TrackMetadata:
        info = await asyncio.to_thread(self._extract_info_sync, link, variant)
        if info is None:
            raise MetadataUnavailableError(link, variant.value, reason="no information returned")
        return self._info_to_metadata(info, variant)

    async def resolve_query(
        self, query: str, variant: TrackVariant = TrackVariant.YOUTUBE_VOD
    ) -> Track:
        results = await asyncio.to_thread(self._search_sync, query, 1)
        for info in results:
            track = self._info_to_track(info, variant)
            if track is not None:
                return track

        logger.info(LogTemplates.YTDLP_NO_SEARCH_RESULTS, query)
        raise ResolutionFailedError(query)

    async def expand_playlist(self, url: str) -> list[Track]:
        entries = await asyncio.to_thread(self._extract_playlist_sync, url)
        tracks: list[Track] = []
        for info in entries:
            track = self._info_to_track(info, TrackVariant.YOUTUBE_VOD)
            if track is not None:
                tracks.append(track)
        return tracks
