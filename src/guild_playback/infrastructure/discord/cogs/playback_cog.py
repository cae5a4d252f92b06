"""Slash-command cog for core playback: play, pause, resume, shuffle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from guild_playback.application.commands.play_track import (
    PlayReply,
    PlayReplyKind,
    PlayTrackCommand,
)
from guild_playback.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from guild_playback.infrastructure.discord.guards.voice_guards import (
    get_joinable_voice_channel,
    send_ephemeral,
)

if TYPE_CHECKING:
    from ....config.container import Container
    from ....domain.music.session import GuildSession

logger = logging.getLogger(__name__)

REPLY_COLORS: dict[PlayReplyKind, discord.Color] = {
    PlayReplyKind.NOW_PLAYING: discord.Color.green(),
    PlayReplyKind.QUEUED: discord.Color.green(),
    PlayReplyKind.PROGRESS: discord.Color.blurple(),
    PlayReplyKind.RESUMED: discord.Color.green(),
    PlayReplyKind.ERROR: discord.Color.red(),
}


def build_reply_embed(reply: PlayReply) -> discord.Embed:
    embed = discord.Embed(description=reply.description, color=REPLY_COLORS[reply.kind])
    if reply.author:
        embed.set_author(name=reply.author)
    if reply.footer:
        embed.set_footer(text=reply.footer)
    return embed


class PlaybackCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    # ─────────────────────────────────────────────────────────────────
    # Play
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="play", description="Plays audio into a voice channel.")
    @app_commands.describe(
        link="YouTube, Spotify, Twitch. No livestreams.",
        query="Generic query for YouTube.",
        stream="YouTube livestream. Twitch is not currently supported.",
        front="Push song (one) to the front of the queue.",
        shuffle="Shuffle the queue.",
    )
    @app_commands.guild_only()
    async def play(
        self,
        interaction: discord.Interaction,
        link: str | None = None,
        query: str | None = None,
        stream: str | None = None,
        front: bool = False,
        shuffle: bool = False,
    ) -> None:
        await interaction.response.defer(ephemeral=True)

        channel = await get_joinable_voice_channel(interaction)
        if channel is None:
            return
        assert interaction.guild is not None

        command = PlayTrackCommand(
            guild_id=interaction.guild.id,
            channel=channel,
            link=link,
            stream=stream,
            query=query,
            push_to_front=front,
            shuffle=shuffle,
        )

        async def respond(reply: PlayReply) -> None:
            try:
                await interaction.edit_original_response(embed=build_reply_embed(reply))
            except discord.HTTPException as e:
                # Interaction tokens expire after 15 minutes; long batches outlive them.
                logger.debug(LogTemplates.REPLY_EDIT_FAILED, e)

        await self.container.play_track_handler.handle(command, respond)

    # ─────────────────────────────────────────────────────────────────
    # Playback Controls
    # ─────────────────────────────────────────────────────────────────

    def _session_for(self, interaction: discord.Interaction) -> GuildSession | None:
        if interaction.guild is None:
            return None
        return self.container.session_registry.get(interaction.guild.id)

    @app_commands.command(name="pause", description="Pause the current track.")
    @app_commands.guild_only()
    async def pause(self, interaction: discord.Interaction) -> None:
        session = self._session_for(interaction)
        if session is None or session.get_current_track() is None:
            await send_ephemeral(interaction, DiscordUIMessages.NOTHING_PLAYING)
            return

        if session.pause():
            await send_ephemeral(interaction, DiscordUIMessages.PAUSED)
        else:
            await send_ephemeral(interaction, DiscordUIMessages.ALREADY_PAUSED)

    @app_commands.command(name="resume", description="Resume paused playback.")
    @app_commands.guild_only()
    async def resume(self, interaction: discord.Interaction) -> None:
        session = self._session_for(interaction)
        if session is None or session.get_current_track() is None:
            await send_ephemeral(interaction, DiscordUIMessages.NOTHING_PLAYING)
            return

        if session.resume():
            await send_ephemeral(interaction, DiscordUIMessages.RESUMED_PLAYBACK)
        else:
            await send_ephemeral(interaction, DiscordUIMessages.NOT_PAUSED)

    @app_commands.command(name="shuffle", description="Shuffle the upcoming tracks.")
    @app_commands.guild_only()
    async def shuffle(self, interaction: discord.Interaction) -> None:
        session = self._session_for(interaction)
        if session is None:
            await send_ephemeral(interaction, DiscordUIMessages.NOTHING_PLAYING)
            return

        count = session.shuffle()
        await send_ephemeral(interaction, DiscordUIMessages.SHUFFLED.format(count=count))

    # ─────────────────────────────────────────────────────────────────
    # Voice teardown
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        if self.bot.user is None or member.id != self.bot.user.id:
            return
        if before.channel is None or after.channel is not None:
            return

        logger.info(LogTemplates.BOT_VOICE_TEARDOWN, member.guild.id)
        self.container.session_registry.remove(member.guild.id)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(PlaybackCog(bot, container))
