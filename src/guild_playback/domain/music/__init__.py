"""
Music Bounded Context

Domain logic for tracks, queues, per-guild sessions and the session registry.
"""

from guild_playback.domain.music.entities import Track, TrackMetadata
from guild_playback.domain.music.links import classify_link, spotify_id
from guild_playback.domain.music.lookup import MetadataLookup
from guild_playback.domain.music.queue import TrackQueue
from guild_playback.domain.music.registry import SessionRegistry
from guild_playback.domain.music.session import GuildSession
from guild_playback.domain.music.value_objects import LinkKind, PlaybackState, TrackVariant

__all__ = [
    # Entities
    "Track",
    "TrackMetadata",
    "TrackQueue",
    "GuildSession",
    # Value Objects
    "TrackVariant",
    "PlaybackState",
    "LinkKind",
    # Links
    "classify_link",
    "spotify_id",
    # Ports / registry
    "MetadataLookup",
    "SessionRegistry",
]
