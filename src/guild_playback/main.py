#!/usr/bin/env python3
"""Entry point: load settings, configure logging, wire the container and run the bot."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import Any

from guild_playback.config.container import create_container
from guild_playback.config.settings import Settings, get_settings
from guild_playback.domain.shared.messages import ErrorMessages, LogTemplates
from guild_playback.infrastructure.discord.bot import create_bot
from guild_playback.utils.logging import ColoredFormatter

logger = logging.getLogger(__name__)

COLORED_FORMATTER = f"{ColoredFormatter.__module__}.{ColoredFormatter.__qualname__}"
FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FALLBACK_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Library loggers the shipped config holds at WARNING; debug mode opens them up.
LIBRARY_LOGGERS = ("discord", "httpx", "yt_dlp")


def _read_logging_config(path: Path) -> dict[str, Any]:
    with path.open(encoding="utf-8") as f:
        config = json.load(f)
    if not isinstance(config, dict):
        raise ValueError(f"{path} does not hold a logging dictConfig mapping")
    return config


def _apply_color_setting(config: dict[str, Any], color: bool | None) -> None:
    for formatter in config.get("formatters", {}).values():
        if formatter.get("()") == COLORED_FORMATTER:
            formatter.setdefault("color", color)


def configure_logging(settings: Settings) -> None:
    """Configure logging from ``settings.log_config_path``.

    Falls back to a single colored console handler when the file is missing
    or invalid. The root level always follows ``settings.effective_log_level``.
    """
    level = settings.effective_log_level
    problem: Exception | None = None

    try:
        config = _read_logging_config(settings.log_config_path)
        _apply_color_setting(config, settings.log_color)
        logging.config.dictConfig(config)
    except (OSError, ValueError, TypeError) as e:
        problem = e
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            ColoredFormatter(FALLBACK_FORMAT, FALLBACK_DATEFMT, color=settings.log_color)
        )
        logging.basicConfig(level=level, handlers=[handler], force=True)

    logging.getLogger().setLevel(level)
    if settings.debug:
        for name in LIBRARY_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG)

    if problem is not None:
        logger.warning(LogTemplates.LOGGING_CONFIG_UNAVAILABLE, settings.log_config_path, problem)


def main() -> int:
    settings = get_settings()
    configure_logging(settings)

    token = settings.discord.token.get_secret_value()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    logger.info(LogTemplates.BOT_STARTING, settings.environment)
    logger.info(
        LogTemplates.BOT_CONFIG_SUMMARY,
        len(settings.discord.guild_ids),
        settings.resolution.max_concurrency,
        settings.progress.interval_seconds,
        "enabled" if settings.spotify.is_configured else "disabled",
    )

    bot = create_bot(create_container(settings), settings)
    try:
        bot.run_with_graceful_shutdown(token, shutdown_timeout=settings.discord.shutdown_timeout_s)
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1

    logger.info(LogTemplates.BOT_STOPPED)
    return 0


def cli() -> None:
    """Console script entry point (``guild-playback``)."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
