"""Discord client for guild playback.

Loads the playback cog, pushes slash commands to the configured guilds (or
globally), turns unhandled command errors into ephemeral replies and closes
every session through the container on shutdown.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING, Any

import discord
from discord import app_commands
from discord.ext import commands

from guild_playback.domain.shared.exceptions import DomainError
from guild_playback.domain.shared.messages import DiscordUIMessages, LogTemplates
from guild_playback.infrastructure.discord.guards.voice_guards import send_ephemeral

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

COGS: tuple[str, ...] = ("guild_playback.infrastructure.discord.cogs.playback_cog",)


def build_intents() -> discord.Intents:
    """Guild and voice-state events only; slash commands need no message content."""
    intents = discord.Intents.none()
    intents.guilds = True
    intents.voice_states = True
    return intents


class PlaybackBot(commands.Bot):
    """Bot that owns the container and hands it to its cogs."""

    def __init__(self, container: Container, settings: Settings, **kwargs: Any) -> None:
        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=build_intents(),
            help_command=None,
            **kwargs,
        )
        self.container = container
        self.settings = settings
        self._shutdown_event = asyncio.Event()
        container.set_bot(self)

    # ── Startup ────────────────────────────────────────────────────────

    async def setup_hook(self) -> None:
        logger.info(LogTemplates.BOT_SETUP)

        for extension in COGS:
            try:
                await self.load_extension(extension)
            except Exception as e:
                # The playback cog is the whole command surface; refuse to start without it.
                logger.exception(LogTemplates.BOT_COG_LOAD_FAILED, extension, e)
                raise
            logger.info(LogTemplates.BOT_COG_LOADED, extension)

        self.tree.on_error = self.on_app_command_error

        if self.settings.discord.sync_on_startup:
            try:
                await self.sync_commands()
            except discord.DiscordException as e:
                logger.warning(LogTemplates.BOT_SYNC_ON_STARTUP_FAILED, e)
        else:
            logger.info(LogTemplates.BOT_SYNC_SKIPPED)

        logger.info(LogTemplates.BOT_SETUP_COMPLETE)

    async def sync_commands(self) -> int:
        """Push slash commands to Discord; returns how many sync targets accepted them.

        With guild ids configured the global commands are copied into those
        guilds only, where they show up immediately. Without any, commands
        are synced globally.
        """
        guild_ids = self.settings.discord.guild_ids
        if not guild_ids:
            return int(await self._sync_to(None))

        synced = 0
        for guild_id in guild_ids:
            guild = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild)
            synced += await self._sync_to(guild)
        return synced

    async def _sync_to(self, guild: discord.Object | None) -> bool:
        try:
            synced = await self.tree.sync(guild=guild)
        except discord.HTTPException as e:
            if guild is None:
                logger.warning(LogTemplates.BOT_SYNC_GLOBAL_FAILED, e)
            else:
                logger.warning(LogTemplates.BOT_SYNC_GUILD_FAILED, guild.id, e)
            return False

        if guild is None:
            logger.info(LogTemplates.BOT_SYNCED_GLOBAL, len(synced))
        else:
            logger.info(LogTemplates.BOT_SYNCED_GUILD, len(synced), guild.id)
        return True

    async def on_ready(self) -> None:
        logger.info(LogTemplates.BOT_READY, self.user, self.user.id if self.user else None)
        logger.info(LogTemplates.BOT_CONNECTED_GUILDS, len(self.guilds))

        activity = discord.Activity(
            type=discord.ActivityType.listening, name=self.settings.discord.activity_name
        )
        await self.change_presence(activity=activity)

    # ── Errors ─────────────────────────────────────────────────────────

    async def on_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        """Reply ephemerally to a failed slash command.

        Domain errors carry a user-facing message and are shown as is;
        anything else is logged with its traceback and reported generically.
        """
        original = getattr(error, "original", error)
        command = getattr(interaction.command, "name", "<unknown>")

        if isinstance(original, DomainError):
            logger.info(LogTemplates.BOT_SLASH_COMMAND_ERROR, command, original.message)
            message = DiscordUIMessages.ERROR_COMMAND_FAILED.format(error=original.message)
        else:
            logger.error(LogTemplates.BOT_SLASH_COMMAND_ERROR, command, original, exc_info=original)
            message = DiscordUIMessages.ERROR_UNEXPECTED

        try:
            await send_ephemeral(interaction, message)
        except discord.HTTPException:
            logger.warning(LogTemplates.BOT_ERROR_MESSAGE_SEND_FAILED)

    # ── Shutdown ───────────────────────────────────────────────────────

    async def close(self) -> None:
        if self._shutdown_event.is_set():
            return
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)

        try:
            closed = await self.container.shutdown()
        except Exception as e:
            logger.warning(LogTemplates.BOT_CONTAINER_SHUTDOWN_ERROR, e)
        else:
            logger.info(LogTemplates.BOT_CONTAINER_SHUTDOWN, closed)

        await super().close()
        self._shutdown_event.set()
        logger.info(LogTemplates.BOT_SHUTDOWN_COMPLETE)

    async def close_with_timeout(self, timeout: float | None = None) -> None:
        """Close, giving up after ``timeout`` seconds (the configured shutdown timeout by default)."""
        timeout = timeout or self.settings.discord.shutdown_timeout_s
        try:
            await asyncio.wait_for(self.close(), timeout=timeout)
        except TimeoutError:
            logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, timeout)

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float | None = None) -> None:
        """Run until SIGINT/SIGTERM, then close within ``shutdown_timeout`` seconds."""

        async def runner() -> None:
            async with self:
                loop = asyncio.get_running_loop()
                for sig in (signal.SIGINT, signal.SIGTERM):
                    loop.add_signal_handler(
                        sig, lambda: asyncio.create_task(self.close_with_timeout(shutdown_timeout))
                    )
                await self.start(token)

        asyncio.run(runner())


def create_bot(container: Container, settings: Settings) -> PlaybackBot:
    return PlaybackBot(container=container, settings=settings)
