"""Process-wide mapping of guild id to its playback session."""

from __future__ import annotations

import logging
import threading
from typing import Any

from guild_playback.domain.music.session import GuildSession
from guild_playback.domain.shared.exceptions import DuplicateSessionError
from guild_playback.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class SessionRegistry:
    """At most one ``GuildSession`` per guild.

    The registry lock covers only the dictionary check-and-insert; it is
    never held while calling into a session.
    """

    def __init__(self) -> None:
        self._sessions: dict[int, GuildSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

    def get(self, guild_id: int) -> GuildSession | None:
        return self._sessions.get(guild_id)

    def create(self, guild_id: int, channel: Any = None) -> GuildSession:
        """Create the session for a guild.

        Raises:
            DuplicateSessionError: If the guild already has one; the error
                carries the existing session.
        """
        with self._lock:
            existing = self._sessions.get(guild_id)
            if existing is not None:
                raise DuplicateSessionError(guild_id, existing)
            session = GuildSession(guild_id, channel)
            self._sessions[guild_id] = session

        logger.info(LogTemplates.SESSION_CREATED, guild_id)
        return session

    def get_or_create(self, guild_id: int, channel: Any = None) -> GuildSession:
        try:
            return self.create(guild_id, channel)
        except DuplicateSessionError as e:
            return e.session

    def remove(self, guild_id: int) -> GuildSession | None:
        """Forget the guild's session and close it; used on voice teardown."""
        with self._lock:
            session = self._sessions.pop(guild_id, None)

        if session is None:
            return None
        session.close()
        logger.info(LogTemplates.SESSION_REMOVED, guild_id)
        return session

    def is_active(self, session: GuildSession) -> bool:
        """Whether the registry still maps the session's guild to this exact session."""
        return self._sessions.get(session.guild_id) is session

    def clear(self) -> int:
        """Close and forget every session; returns the count removed."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()

        for session in sessions:
            session.close()
        return len(sessions)
