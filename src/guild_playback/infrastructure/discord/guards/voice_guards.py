"""Reusable voice-channel guard functions for Discord slash commands.

These are free functions that accept explicit dependencies rather than relying
on a specific cog instance, making them usable from any cog.
"""

from __future__ import annotations

import discord

from guild_playback.domain.shared.messages import DiscordUIMessages


async def send_ephemeral(interaction: discord.Interaction, message: str) -> None:
    """Send an ephemeral message, handling both fresh and already-responded interactions."""
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


async def get_member(interaction: discord.Interaction) -> discord.Member | None:
    """Validate that the interaction comes from a guild member. Returns None with error on failure."""
    if not interaction.guild:
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_GUILD_ONLY)
        return None

    user = interaction.user
    if not isinstance(user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_UNRESOLVED_USER)
        return None

    return user


async def get_joinable_voice_channel(
    interaction: discord.Interaction,
) -> discord.VoiceChannel | discord.StageChannel | None:
    """Return the member's voice channel if the bot may connect to it.

    Sends an ephemeral explanation and returns None otherwise.
    """
    member = await get_member(interaction)
    if member is None:
        return None

    if not member.voice or not member.voice.channel:
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_NOT_IN_VOICE)
        return None

    channel = member.voice.channel
    assert interaction.guild is not None
    if not channel.permissions_for(interaction.guild.me).connect:
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_CANNOT_JOIN_VOICE)
        return None

    return channel
