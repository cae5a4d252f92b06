# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, constrained types and messages
- music/: Track, queue, session and session registry
"""

from guild_playback.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
