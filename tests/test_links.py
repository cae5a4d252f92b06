"""Tests for link classification and Spotify id extraction."""

import pytest

from guild_playback.domain.music.links import classify_link, is_youtube_video, spotify_id
from guild_playback.domain.music.value_objects import LinkKind


class TestClassifyLink:
    """Unit tests for classify_link."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtube.com/watch?v=dQw4w9WgXcQ&t=42",
            "https://m.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://music.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ",
            "https://www.youtube.com/shorts/dQw4w9WgXcQ",
            "https://www.youtube.com/live/dQw4w9WgXcQ",
            "youtube.com/watch?v=dQw4w9WgXcQ",
            # Short list ids (watch later, likes) are not real playlists.
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=WL",
        ],
    )
    def test_youtube_video(self, url):
        assert classify_link(url) is LinkKind.YOUTUBE_VIDEO
        assert is_youtube_video(url) is True

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/playlist?list=PLrAXtmErZgOeiKm4sgNOknGvNjby9efdf",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PLrAXtmErZgOeiKm4sgNOknGvNjby9efdf",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=RDdQw4w9WgXcQ",
        ],
    )
    def test_youtube_playlist(self, url):
        assert classify_link(url) is LinkKind.YOUTUBE_PLAYLIST

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.twitch.tv/videos/1234567890",
            "https://twitch.tv/videos/42/",
        ],
    )
    def test_twitch_vod(self, url):
        assert classify_link(url) is LinkKind.TWITCH_VOD

    @pytest.mark.parametrize(
        ("url", "kind"),
        [
            ("https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC", LinkKind.SPOTIFY_TRACK),
            ("https://open.spotify.com/album/1ATL5GLyefJaxhQzSPVrLX?si=abc", LinkKind.SPOTIFY_ALBUM),
            ("https://open.spotify.com/intl-de/album/1ATL5GLyefJaxhQzSPVrLX", LinkKind.SPOTIFY_ALBUM),
            ("https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M", LinkKind.SPOTIFY_PLAYLIST),
            ("spotify:track:4uLU6hMCjMI75M1A2tKUQC", LinkKind.SPOTIFY_TRACK),
        ],
    )
    def test_spotify(self, url, kind):
        assert classify_link(url) is kind
        assert kind.is_spotify

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "   ",
            "not a link",
            "https://www.youtube.com/watch?v=short",
            "https://www.youtube.com/channel/UC38IQsAvIsxxjztdMZQtwHA",
            "https://www.twitch.tv/somechannel",
            "https://open.spotify.com/artist/0OdUWJ0sBjDrqHygGUXeCF",
            "https://example.com/song.mp3",
        ],
    )
    def test_unknown(self, url):
        assert classify_link(url) is LinkKind.UNKNOWN
        assert is_youtube_video(url) is False


class TestSpotifyId:
    """Unit tests for spotify_id."""

    def test_from_url(self):
        assert spotify_id("https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=x") == "4uLU6hMCjMI75M1A2tKUQC"

    def test_from_uri(self):
        assert spotify_id("spotify:playlist:37i9dQZF1DXcBWIGoYBM5M") == "37i9dQZF1DXcBWIGoYBM5M"

    def test_non_spotify_returns_none(self):
        assert spotify_id("https://youtu.be/dQw4w9WgXcQ") is None
        assert spotify_id("https://open.spotify.com/artist/0OdUWJ0sBjDrqHygGUXeCF") is None
