"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum


class TrackVariant(Enum):
    """Where a track comes from; decides how its metadata is looked up."""

    YOUTUBE_VOD = "youtube_vod"
    YOUTUBE_LIVESTREAM = "youtube_livestream"
    TWITCH_VOD = "twitch_vod"
    SPOTIFY_DERIVED = "spotify_derived"  # YouTube match for a Spotify catalog entry

    @property
    def is_live(self) -> bool:
        return self is TrackVariant.YOUTUBE_LIVESTREAM


class PlaybackState(Enum):
    """Playback state of a guild session.

    State transitions:
    - IDLE -> PLAYING (first successful enqueue)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (resume)
    - PLAYING/PAUSED -> IDLE (advance past the last track)
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            PlaybackState.IDLE: {PlaybackState.PLAYING},
            PlaybackState.PLAYING: {PlaybackState.PAUSED, PlaybackState.IDLE},
            PlaybackState.PAUSED: {PlaybackState.PLAYING, PlaybackState.IDLE},
        }
        return target in valid_transitions.get(self, set())


class LinkKind(Enum):
    """Classification of a user-supplied link."""

    YOUTUBE_VIDEO = "youtube_video"
    YOUTUBE_PLAYLIST = "youtube_playlist"
    TWITCH_VOD = "twitch_vod"
    SPOTIFY_TRACK = "spotify_track"
    SPOTIFY_ALBUM = "spotify_album"
    SPOTIFY_PLAYLIST = "spotify_playlist"
    UNKNOWN = "unknown"

    @property
    def is_spotify(self) -> bool:
        return self in {
            LinkKind.SPOTIFY_TRACK,
            LinkKind.SPOTIFY_ALBUM,
            LinkKind.SPOTIFY_PLAYLIST,
        }
