"""
Unit Tests for YtDlpTrackResolver

Tests for the yt-dlp based resolver infrastructure:
- Info model coercion and link fallbacks
- Per-variant yt-dlp options (livestream, Twitch, PO-token provider)
- Metadata lookup with TTL caching
- Search resolution and playlist expansion
- Error handling

yt-dlp itself is mocked; nothing touches the network.
"""

import asyncio
import time
from unittest.mock import MagicMock, patch

import pytest

from guild_playback.config.settings import ResolutionSettings
from guild_playback.domain.music.value_objects import TrackVariant
from guild_playback.domain.shared.exceptions import MetadataUnavailableError, ResolutionFailedError
from guild_playback.infrastructure.audio.models import CacheEntry, YtDlpTrackInfo
from guild_playback.infrastructure.audio.ytdlp_resolver import (
    YtDlpTrackResolver,
    _cache_lock,
    _info_cache,
)

MODULE = "guild_playback.infrastructure.audio.ytdlp_resolver"
VIDEO = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def resolver():
    return YtDlpTrackResolver(ResolutionSettings())


@pytest.fixture
def video_info():
    return {
        "id": "dQw4w9WgXcQ",
        "webpage_url": VIDEO,
        "title": "Never Gonna Give You Up",
        "duration": 213,
        "thumbnail": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
        "uploader": "Rick Astley",
        "formats": [{"format_id": "251"}],
    }


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear the global cache before each test."""
    _info_cache.clear()
    yield
    _info_cache.clear()


def _mock_ydl(result=None, side_effect=None) -> MagicMock:
    ydl_cls = MagicMock()
    ydl = ydl_cls.return_value.__enter__.return_value
    if side_effect is not None:
        ydl.extract_info.side_effect = side_effect
    else:
        ydl.extract_info.return_value = result
    return ydl_cls


# =============================================================================
# Info model
# =============================================================================


class TestYtDlpTrackInfo:
    """Unit tests for coercion of raw yt-dlp dicts."""

    def test_garbage_fields_are_coerced(self):
        info = YtDlpTrackInfo.model_validate(
            {"title": "  ", "duration": -5, "uploader": "", "thumbnail": "data:image/png"}
        )

        assert info.title == "Unknown Title"
        assert info.duration is None
        assert info.uploader is None
        assert info.thumbnail is None

    def test_link_fallbacks(self):
        assert YtDlpTrackInfo(webpage_url=VIDEO).link == VIDEO
        assert YtDlpTrackInfo(url="https://youtu.be/abc").link == "https://youtu.be/abc"
        assert YtDlpTrackInfo(url="abc", id="dQw4w9WgXcQ").link == VIDEO
        assert YtDlpTrackInfo().link is None

    def test_unavailable_placeholder(self):
        assert YtDlpTrackInfo(title="[Private video]").is_unavailable is True
        assert YtDlpTrackInfo(title="Song").is_unavailable is False


# =============================================================================
# Options
# =============================================================================


class TestOptions:
    """Unit tests for per-variant yt-dlp parameters."""

    def test_vod_uses_configured_format(self, resolver):
        params = resolver._opts_for(TrackVariant.YOUTUBE_VOD).to_params()

        assert params["format"] == "bestaudio/best"
        assert params["noplaylist"] is True
        assert "extractor_args" not in params

    def test_livestream_drops_format(self, resolver):
        params = resolver._opts_for(TrackVariant.YOUTUBE_LIVESTREAM).to_params()
        assert "format" not in params

    def test_pot_provider_configured(self):
        resolver = YtDlpTrackResolver(ResolutionSettings(pot_server_url="http://127.0.0.1:4416"))

        params = resolver._opts_for(TrackVariant.YOUTUBE_VOD).to_params()

        assert params["extractor_args"]["youtubepot-bgutilhttp"] == {
            "base_url": ["http://127.0.0.1:4416"]
        }

    def test_twitch_skips_youtube_extractor_args(self):
        resolver = YtDlpTrackResolver(ResolutionSettings(pot_server_url="http://127.0.0.1:4416"))

        params = resolver._opts_for(TrackVariant.TWITCH_VOD).to_params()

        assert "extractor_args" not in params

    def test_playlist_opts_are_flat(self, resolver):
        params = resolver._get_playlist_opts().to_params()

        assert params["noplaylist"] is False
        assert params["extract_flat"] == "in_playlist"


# =============================================================================
# Metadata lookup
# =============================================================================


class TestFetchMetadata:
    """Unit tests for fetch_metadata."""

    @pytest.mark.asyncio
    async def test_returns_metadata(self, resolver, video_info):
        with patch(f"{MODULE}.YoutubeDL", _mock_ydl(video_info)):
            meta = await resolver.fetch_metadata(VIDEO, TrackVariant.YOUTUBE_VOD)

        assert meta.title == "Never Gonna Give You Up"
        assert meta.duration_seconds == 213
        assert meta.uploader == "Rick Astley"
        assert meta.is_live is False

    @pytest.mark.asyncio
    async def test_livestream_has_no_duration(self, resolver, video_info):
        with patch(f"{MODULE}.YoutubeDL", _mock_ydl(video_info)):
            meta = await resolver.fetch_metadata(VIDEO, TrackVariant.YOUTUBE_LIVESTREAM)

        assert meta.is_live is True
        assert meta.duration_seconds is None

    @pytest.mark.asyncio
    async def test_extraction_error_raises_unavailable(self, resolver):
        with patch(f"{MODULE}.YoutubeDL", _mock_ydl(side_effect=Exception("Sign in to confirm your age"))):
            with pytest.raises(MetadataUnavailableError):
                await resolver.fetch_metadata(VIDEO, TrackVariant.YOUTUBE_VOD)

    @pytest.mark.asyncio
    async def test_cache_hit_skips_extraction(self, resolver, video_info):
        """Should serve the second lookup from the module cache."""
        ydl_cls = _mock_ydl(video_info)
        with patch(f"{MODULE}.YoutubeDL", ydl_cls):
            await resolver.fetch_metadata(VIDEO, TrackVariant.YOUTUBE_VOD)
            await resolver.fetch_metadata(VIDEO, TrackVariant.YOUTUBE_VOD)

        assert ydl_cls.call_count == 1

    @pytest.mark.asyncio
    async def test_cache_is_keyed_by_variant(self, resolver, video_info):
        ydl_cls = _mock_ydl(video_info)
        with patch(f"{MODULE}.YoutubeDL", ydl_cls):
            await resolver.fetch_metadata(VIDEO, TrackVariant.YOUTUBE_VOD)
            await resolver.fetch_metadata(VIDEO, TrackVariant.YOUTUBE_LIVESTREAM)

        assert ydl_cls.call_count == 2

    @pytest.mark.asyncio
    async def test_expired_entry_is_refetched(self, resolver, video_info):
        _info_cache[f"youtube_vod:{VIDEO}"] = CacheEntry(
            info=YtDlpTrackInfo(title="Stale"), cached_at=time.time() - 10_000
        )
        with patch(f"{MODULE}.YoutubeDL", _mock_ydl(video_info)):
            meta = await resolver.fetch_metadata(VIDEO, TrackVariant.YOUTUBE_VOD)

        assert meta.title == "Never Gonna Give You Up"

    def test_prune_drops_oldest_overflow(self):
        resolver = YtDlpTrackResolver(ResolutionSettings(metadata_cache_max_size=2))
        now = time.time()
        for i in range(3):
            _info_cache[f"youtube_vod:{i}"] = CacheEntry(info=None, cached_at=now + i)

        resolver._prune_cache(now + 3)

        assert sorted(_info_cache) == ["youtube_vod:1", "youtube_vod:2"]

    @pytest.mark.asyncio
    async def test_prune_runs_under_cache_lock(self, video_info):
        resolver = YtDlpTrackResolver(ResolutionSettings(metadata_cache_max_size=1))
        held = []
        original = resolver._prune_cache

        def recording_prune(now):
            held.append(_cache_lock.locked())
            original(now)

        resolver._prune_cache = recording_prune
        with patch(f"{MODULE}.YoutubeDL", _mock_ydl(video_info)):
            await resolver.fetch_metadata(VIDEO, TrackVariant.YOUTUBE_VOD)

        assert held == [True]

    @pytest.mark.asyncio
    async def test_concurrent_lookups_over_size_limit(self, video_info):
        """Should keep every successful lookup when workers prune at the same time."""
        resolver = YtDlpTrackResolver(ResolutionSettings(metadata_cache_max_size=2))
        links = [f"https://www.youtube.com/watch?v=video{i:06d}" for i in range(12)]

        with patch(f"{MODULE}.YoutubeDL", _mock_ydl(video_info)):
            results = await asyncio.gather(
                *(resolver.fetch_metadata(link, TrackVariant.YOUTUBE_VOD) for link in links)
            )

        assert all(meta.title == "Never Gonna Give You Up" for meta in results)
        assert len(_info_cache) <= 2


# =============================================================================
# Search and playlists
# =============================================================================


class TestResolveQuery:
    """Unit tests for resolve_query."""

    @pytest.mark.asyncio
    async def test_returns_primed_track(self, resolver):
        result = {"entries": [{"id": "dQw4w9WgXcQ", "url": VIDEO, "title": "Rick", "duration": 213}]}

        with patch(f"{MODULE}.YoutubeDL", _mock_ydl(result)) as ydl_cls:
            track = await resolver.resolve_query("rick astley", TrackVariant.SPOTIFY_DERIVED)

        ydl = ydl_cls.return_value.__enter__.return_value
        ydl.extract_info.assert_called_once_with("ytsearch1:rick astley", download=False)
        assert track.link == VIDEO
        assert track.variant is TrackVariant.SPOTIFY_DERIVED
        assert track.metadata.title == "Rick"

    @pytest.mark.asyncio
    async def test_no_results_raises(self, resolver):
        with patch(f"{MODULE}.YoutubeDL", _mock_ydl({"entries": []})):
            with pytest.raises(ResolutionFailedError):
                await resolver.resolve_query("nothing matches this")

    @pytest.mark.asyncio
    async def test_search_error_raises(self, resolver):
        with patch(f"{MODULE}.YoutubeDL", _mock_ydl(side_effect=Exception("HTTP Error 429"))):
            with pytest.raises(ResolutionFailedError):
                await resolver.resolve_query("anything")


class TestExpandPlaylist:
    """Unit tests for expand_playlist."""

    @pytest.mark.asyncio
    async def test_skips_unplayable_entries(self, resolver):
        result = {
            "entries": [
                {"id": "aaaaaaaaaaa", "title": "First"},
                {"id": "bbbbbbbbbbb", "title": "[Deleted video]"},
                {"title": "No link"},
                None,
                {"id": "ccccccccccc", "url": "https://www.youtube.com/watch?v=ccccccccccc", "title": "Third"},
            ]
        }

        with patch(f"{MODULE}.YoutubeDL", _mock_ydl(result)):
            tracks = await resolver.expand_playlist("https://www.youtube.com/playlist?list=PLxxxxxxxxxxxx")

        assert [t.metadata.title for t in tracks] == ["First", "Third"]
        assert tracks[0].link == "https://www.youtube.com/watch?v=aaaaaaaaaaa"

    @pytest.mark.asyncio
    async def test_failure_returns_empty(self, resolver):
        with patch(f"{MODULE}.YoutubeDL", _mock_ydl(side_effect=Exception("boom"))):
            assert await resolver.expand_playlist("https://www.youtube.com/playlist?list=PLx") == []
