"""Console log formatter: colored level names and short logger names."""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Any, Final

PACKAGE_PREFIX: Final[str] = "guild_playback."


class ColoredFormatter(logging.Formatter):
    """Formatter for the console handler configured in ``logging_config.json``.

    ``color`` forces ANSI colors on or off. Left as None, colors are used only
    when the stream is a TTY and ``NO_COLOR`` is unset. Logger names under
    this package lose their ``guild_playback.`` prefix so session and pipeline
    lines stay readable next to discord.py and yt-dlp output.
    """

    LEVEL_COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: Any = "%",
        *,
        color: bool | None = None,
        stream: IO[str] | None = None,
        strip_prefix: str | None = PACKAGE_PREFIX,
        **kwargs: Any,
    ) -> None:
        super().__init__(fmt, datefmt, style, **kwargs)
        self._color = color
        self._stream = stream
        self._strip_prefix = strip_prefix

    def use_color(self) -> bool:
        if self._color is not None:
            return self._color
        if "NO_COLOR" in os.environ:
            return False
        isatty = getattr(self._stream or sys.stdout, "isatty", None)
        return bool(isatty and isatty())

    def short_name(self, name: str) -> str:
        prefix = self._strip_prefix
        if prefix and name.startswith(prefix):
            return name[len(prefix):]
        return name

    def format(self, record: logging.LogRecord) -> str:
        colored = self.use_color()
        name = self.short_name(record.name)
        if not colored and name == record.name:
            return super().format(record)

        # Other handlers share the record; format a copy.
        record = logging.makeLogRecord(record.__dict__)
        record.name = name
        if colored:
            color = self.LEVEL_COLORS.get(record.levelno, "")
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)
