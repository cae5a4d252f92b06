"""Date/time helpers. Everything in the engine is timezone-aware UTC."""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Timezone-aware replacement for ``datetime.utcnow()``."""
    return datetime.now(UTC)
