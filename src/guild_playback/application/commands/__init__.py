"""
Application Commands (Write Side)

Command objects and their handlers for write operations.
Commands represent intent to change the system state.
"""

from guild_playback.application.commands.play_track import (
    PlayReply,
    PlayReplyKind,
    PlayTrackCommand,
    PlayTrackHandler,
)

__all__ = [
    "PlayTrackCommand",
    "PlayTrackHandler",
    "PlayReply",
    "PlayReplyKind",
]
