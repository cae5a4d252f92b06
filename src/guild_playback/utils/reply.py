"""Utility functions for formatting Discord replies."""

from __future__ import annotations

from functools import cache


@cache
def format_duration(seconds: int | float | None) -> str:
    if seconds is None:
        return "–"

    total_seconds = int(seconds)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    secs = total_seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_progress(elapsed_seconds: int | float, duration_seconds: int | float | None) -> str | None:
    """Render an ``elapsed / total`` footer such as ``0:00 / 3:45``.

    Returns None when the total is unknown (e.g. livestreams), so callers
    can omit the footer entirely.
    """
    if not duration_seconds:
        return None
    elapsed = min(max(elapsed_seconds, 0), duration_seconds)
    return f"{format_duration(elapsed)} / {format_duration(duration_seconds)}"


def append_line(text: str | None, line: str) -> str:
    """Append a line to an optional multi-line description."""
    return f"{text}\n{line}" if text else line
