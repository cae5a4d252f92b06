"""Audio infrastructure - yt-dlp metadata lookup, search and playlist expansion."""

from guild_playback.infrastructure.audio.models import (
    CacheEntry,
    ExtractorArgs,
    PotProviderConfig,
    YouTubeExtractorConfig,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from guild_playback.infrastructure.audio.ytdlp_resolver import YtDlpTrackResolver

__all__ = [
    "CacheEntry",
    "ExtractorArgs",
    "PotProviderConfig",
    "YouTubeExtractorConfig",
    "YtDlpOpts",
    "YtDlpTrackInfo",
    "YtDlpTrackResolver",
]
