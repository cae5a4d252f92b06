"""
Unit Tests for SessionRegistry

Tests for:
- One session per guild (create, duplicate detection, get_or_create)
- Removal closing the session and cancelling its background work
- Identity checks used by background batches
- Thread-safe creation
"""

import asyncio
import threading

import pytest

from guild_playback.domain.music.registry import SessionRegistry
from guild_playback.domain.music.session import GuildSession
from guild_playback.domain.shared.exceptions import DuplicateSessionError


@pytest.fixture
def registry():
    return SessionRegistry()


class TestCreate:
    """Unit tests for session creation."""

    def test_create_registers_session(self, registry):
        session = registry.create(42, channel="voice")

        assert isinstance(session, GuildSession)
        assert session.channel == "voice"
        assert registry.get(42) is session
        assert 42 in registry
        assert len(registry) == 1

    def test_duplicate_create_carries_existing(self, registry):
        """Should refuse a second session and hand back the first."""
        first = registry.create(42)

        with pytest.raises(DuplicateSessionError) as exc_info:
            registry.create(42)

        assert exc_info.value.session is first
        assert exc_info.value.code == "DUPLICATE_SESSION"

    def test_get_or_create_reuses(self, registry):
        first = registry.get_or_create(42)
        assert registry.get_or_create(42) is first

    def test_get_missing_returns_none(self, registry):
        assert registry.get(7) is None

    def test_concurrent_creation_yields_one_session(self, registry):
        """Should create exactly one session when threads race."""
        results: list[GuildSession] = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(registry.get_or_create(42))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(s) for s in results}) == 1
        assert len(registry) == 1


class TestRemove:
    """Unit tests for session removal."""

    def test_remove_closes_session(self, registry):
        session = registry.create(42)

        removed = registry.remove(42)

        assert removed is session
        assert session.closed is True
        assert registry.get(42) is None

    def test_remove_unknown_is_noop(self, registry):
        assert registry.remove(42) is None

    @pytest.mark.asyncio
    async def test_remove_cancels_background_tasks(self, registry):
        session = registry.create(42)
        task = asyncio.create_task(asyncio.sleep(10))
        session.attach_task(task)

        registry.remove(42)

        with pytest.raises(asyncio.CancelledError):
            await task

    def test_is_active_tracks_identity(self, registry):
        """Should treat a replacement session as a different session."""
        old = registry.create(42)
        assert registry.is_active(old) is True

        registry.remove(42)
        new = registry.create(42)

        assert registry.is_active(old) is False
        assert registry.is_active(new) is True

    def test_clear_closes_everything(self, registry):
        sessions = [registry.create(gid) for gid in (1, 2, 3)]

        assert registry.clear() == 3
        assert len(registry) == 0
        assert all(s.closed for s in sessions)
