"""Classification of user-supplied links into the sources the bot can play."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

from guild_playback.domain.music.value_objects import LinkKind

_YOUTUBE_HOSTS = frozenset(
    {"youtube.com", "www.youtube.com", "m.youtube.com", "music.youtube.com", "youtu.be"}
)
_TWITCH_HOSTS = frozenset({"twitch.tv", "www.twitch.tv", "m.twitch.tv"})
_SPOTIFY_HOSTS = frozenset({"open.spotify.com", "play.spotify.com"})

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")
_PLAYLIST_ID_RE = re.compile(r"^[A-Za-z0-9_-]{12,}$")
_TWITCH_VOD_PATH_RE = re.compile(r"^/videos/\d+/?$")
_SPOTIFY_PATH_RE = re.compile(r"^/(?:intl-[a-z]{2}(?:-[a-z]{2})?/)?(track|album|playlist)/([A-Za-z0-9]+)/?$")
_SPOTIFY_URI_RE = re.compile(r"^spotify:(track|album|playlist):([A-Za-z0-9]+)$")

_SPOTIFY_KINDS = {
    "track": LinkKind.SPOTIFY_TRACK,
    "album": LinkKind.SPOTIFY_ALBUM,
    "playlist": LinkKind.SPOTIFY_PLAYLIST,
}


def classify_link(url: str) -> LinkKind:
    """Decide which source a link points at. Never raises."""
    url = (url or "").strip()
    if uri := _SPOTIFY_URI_RE.match(url):
        return _SPOTIFY_KINDS[uri.group(1)]

    try:
        parsed = urlparse(url if "://" in url else f"https://{url}")
    except ValueError:
        return LinkKind.UNKNOWN

    host = (parsed.hostname or "").lower()
    if host in _YOUTUBE_HOSTS:
        return _classify_youtube(host, parsed.path, parse_qs(parsed.query))
    if host in _TWITCH_HOSTS:
        return LinkKind.TWITCH_VOD if _TWITCH_VOD_PATH_RE.match(parsed.path) else LinkKind.UNKNOWN
    if host in _SPOTIFY_HOSTS:
        match = _SPOTIFY_PATH_RE.match(parsed.path)
        return _SPOTIFY_KINDS[match.group(1)] if match else LinkKind.UNKNOWN
    return LinkKind.UNKNOWN


def _classify_youtube(host: str, path: str, params: dict[str, list[str]]) -> LinkKind:
    playlist_id = params.get("list", [""])[0]
    if playlist_id and _PLAYLIST_ID_RE.match(playlist_id):
        return LinkKind.YOUTUBE_PLAYLIST

    if host == "youtu.be":
        video_id = path.strip("/")
    elif path == "/watch":
        video_id = params.get("v", [""])[0]
    else:
        # /shorts/<id>, /live/<id>, /embed/<id>
        parts = [p for p in path.split("/") if p]
        video_id = parts[1] if len(parts) == 2 and parts[0] in {"shorts", "live", "embed"} else ""

    return LinkKind.YOUTUBE_VIDEO if _VIDEO_ID_RE.match(video_id) else LinkKind.UNKNOWN


def is_youtube_video(url: str) -> bool:
    return classify_link(url) is LinkKind.YOUTUBE_VIDEO


def spotify_id(url: str) -> str | None:
    """Extract the catalog id from a Spotify URL or URI, or None."""
    url = (url or "").strip()
    match = _SPOTIFY_URI_RE.match(url)
    if match:
        return match.group(2)

    try:
        parsed = urlparse(url if "://" in url else f"https://{url}")
    except ValueError:
        return None
    if (parsed.hostname or "").lower() not in _SPOTIFY_HOSTS:
        return None
    match = _SPOTIFY_PATH_RE.match(parsed.path)
    return match.group(2) if match else None
