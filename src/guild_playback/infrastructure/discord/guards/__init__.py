"""Reusable guard helpers for slash commands."""

from guild_playback.infrastructure.discord.guards.voice_guards import (
    get_joinable_voice_channel,
    get_member,
    send_ephemeral,
)

__all__ = [
    "get_joinable_voice_channel",
    "get_member",
    "send_ephemeral",
]
