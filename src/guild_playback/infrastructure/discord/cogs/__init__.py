"""Discord cogs - command handlers."""

from guild_playback.infrastructure.discord.cogs.playback_cog import PlaybackCog

__all__ = [
    "PlaybackCog",
]
