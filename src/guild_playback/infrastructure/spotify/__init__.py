"""Spotify infrastructure - catalog client for album, playlist and track links."""

from guild_playback.infrastructure.spotify.client import SpotifyClient

__all__ = [
    "SpotifyClient",
]
