"""
Shared Domain Kernel

Exceptions, constrained types and message templates shared by every layer.
"""

from guild_playback.domain.shared.exceptions import (
    DomainError,
    DuplicateSessionError,
    InvalidLinkError,
    InvalidOperationError,
    MetadataUnavailableError,
    ResolutionFailedError,
    SpotifyLookupError,
)

__all__ = [
    "DomainError",
    "DuplicateSessionError",
    "InvalidLinkError",
    "InvalidOperationError",
    "MetadataUnavailableError",
    "ResolutionFailedError",
    "SpotifyLookupError",
]
