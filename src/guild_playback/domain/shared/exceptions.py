"""Base exception classes for domain-level errors."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from guild_playback.domain.music.session import GuildSession


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class MetadataUnavailableError(DomainError):
    """The track exists but its title/duration could not be fetched.

    Cached on the track for its lifetime; callers show a degraded display
    instead of failing the whole queue.
    """

    def __init__(self, link: str, variant: str, reason: str | None = None) -> None:
        msg = f"Could not fetch metadata for {variant} track {link}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, code="METADATA_UNAVAILABLE")
        self.link = link
        self.variant = variant
        self.reason = reason


class ResolutionFailedError(DomainError):
    """A search query or link could not be turned into a playable track."""

    def __init__(self, query: str, message: str | None = None) -> None:
        msg = message or f"Could not find a track for '{query}'"
        super().__init__(msg, code="RESOLUTION_FAILED")
        self.query = query


class DuplicateSessionError(DomainError):
    """A session already exists for the guild; use the registry's ``get`` instead."""

    def __init__(self, guild_id: int, session: GuildSession) -> None:
        super().__init__(
            f"A playback session already exists for guild {guild_id}",
            code="DUPLICATE_SESSION",
        )
        self.guild_id = guild_id
        self.session = session


class InvalidLinkError(DomainError):
    """Raised when a link is not a supported YouTube, Twitch or Spotify URL."""

    def __init__(self, link: str, message: str | None = None) -> None:
        super().__init__(message or "Invalid link.", code="INVALID_LINK")
        self.link = link


class SpotifyLookupError(DomainError):
    """Raised when the Spotify catalog cannot be queried."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, code="SPOTIFY_LOOKUP_FAILED")
        self.status_code = status_code
