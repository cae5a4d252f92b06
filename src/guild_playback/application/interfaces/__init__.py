"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from guild_playback.application.interfaces.spotify_catalog import SpotifyCatalog
from guild_playback.application.interfaces.track_resolver import PlaylistExpander, TrackResolver

__all__ = [
    "TrackResolver",
    "PlaylistExpander",
    "SpotifyCatalog",
]
