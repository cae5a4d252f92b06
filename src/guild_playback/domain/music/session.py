"""Per-guild playback session: the queue plus its playback state machine."""

from __future__ import annotations

import asyncio
import logging
import random
import threading
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from guild_playback.domain.music.entities import Track
from guild_playback.domain.music.queue import TrackQueue
from guild_playback.domain.music.value_objects import PlaybackState
from guild_playback.domain.shared.datetime_utils import utcnow
from guild_playback.domain.shared.exceptions import InvalidOperationError
from guild_playback.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)


class GuildSession:
    """Aggregate root managing playback state for a single Discord guild.

    Every mutator takes the session's re-entrant lock, so callers running in
    worker threads and on the event loop see one mutation at a time. No
    mutator awaits while holding the lock.
    """

    def __init__(
        self,
        guild_id: int,
        channel: Any = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self.guild_id = guild_id
        self.channel = channel
        self.queue = TrackQueue()
        self.created_at: datetime = utcnow()
        self.last_activity: datetime = self.created_at

        self._current: Track | None = None
        self._shuffled = False
        self._paused = False
        self._closed = False
        self._rng = rng or random.Random()
        self._lock = threading.RLock()
        self._tasks: set[asyncio.Task[Any]] = set()

    def __repr__(self) -> str:
        return f"GuildSession(guild_id={self.guild_id}, state={self.state.value}, queued={len(self.queue)})"

    # ── State ──────────────────────────────────────────────────────────

    @property
    def current_track(self) -> Track | None:
        return self._current

    @property
    def shuffled(self) -> bool:
        return self._shuffled

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_playing(self) -> bool:
        return self._current is not None

    @property
    def state(self) -> PlaybackState:
        if self._current is None:
            return PlaybackState.IDLE
        return PlaybackState.PAUSED if self._paused else PlaybackState.PLAYING

    @property
    def upcoming(self) -> list[Track]:
        with self._lock:
            return self.queue.upcoming

    def get_current_track(self) -> Track | None:
        """Non-blocking read of the now-playing track."""
        return self._current

    def upcoming_position(self, push_to_front: bool = False) -> int:
        """1-based queue position of the track just enqueued, counted after the head."""
        if push_to_front:
            return 1
        with self._lock:
            return len(self.queue.upcoming)

    def touch(self) -> None:
        """Update last activity timestamp."""
        self.last_activity = utcnow()

    # ── Mutators ───────────────────────────────────────────────────────

    def enqueue(self, tracks: Iterable[Track], push_to_front: bool = False) -> bool:
        """Add tracks to the queue and start playback when idle.

        Returns whether a track was already playing before this call.

        Raises:
            InvalidOperationError: If the session has been closed.
        """
        batch = list(tracks)
        with self._lock:
            self._ensure_open("enqueue")
            was_playing = self._current is not None
            if not batch:
                return was_playing

            self.queue.append(batch, to_front=push_to_front)
            if not was_playing:
                self._current = self.queue.start()
            self.touch()

        logger.debug(LogTemplates.QUEUE_ENQUEUED, len(batch), self.guild_id, push_to_front, was_playing)
        return was_playing

    def advance(self) -> Track | None:
        """Drop the finished head and promote the next track.

        Called by the audio transport when a track ends. Returns the new
        current track, or None once the queue is exhausted and the session
        is idle.
        """
        with self._lock:
            self.queue.advance()
            self._current = self.queue.now_playing
            if self._current is None:
                self._paused = False
            self.touch()
            current = self._current

        if current is None:
            logger.info(LogTemplates.QUEUE_EXHAUSTED, self.guild_id)
        else:
            logger.debug(LogTemplates.QUEUE_ADVANCED, self.guild_id, current.link)
        return current

    def pause(self) -> bool:
        """Pause playback. Returns False when idle or already paused."""
        with self._lock:
            if not self.state.can_transition_to(PlaybackState.PAUSED):
                return False
            self._paused = True
            self.touch()

        logger.info(LogTemplates.PLAYBACK_PAUSED, self.guild_id)
        return True

    def resume(self) -> bool:
        """Resume playback. Returns False unless the session was paused."""
        with self._lock:
            if self.state is not PlaybackState.PAUSED:
                return False
            self._paused = False
            self.touch()

        logger.info(LogTemplates.PLAYBACK_RESUMED, self.guild_id)
        return True

    def shuffle(self) -> int:
        """Turn shuffle on and shuffle every track after the playing one.

        Later batch enqueues see ``shuffled`` and shuffle their input too.
        Returns the number of tracks shuffled.
        """
        with self._lock:
            self._ensure_open("shuffle")
            self._shuffled = True
            count = self.queue.shuffle_remaining(self._rng)
            self.touch()

        logger.debug(LogTemplates.QUEUE_SHUFFLED, count, self.guild_id)
        return count

    def shuffle_items(self, items: list[Any]) -> None:
        """Shuffle a batch in place with the session's random source."""
        with self._lock:
            self._rng.shuffle(items)

    # ── Lifecycle ──────────────────────────────────────────────────────

    def attach_task(self, task: asyncio.Task[Any]) -> None:
        """Bind a background task to this session; it is cancelled on close."""
        with self._lock:
            if self._closed:
                task.cancel()
                return
            self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def close(self) -> None:
        """Stop using this session and cancel its background tasks."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            tasks = list(self._tasks)
            self._tasks.clear()

        if tasks:
            logger.debug(LogTemplates.SESSION_CLOSED_TASKS, len(tasks), self.guild_id)
        for task in tasks:
            task.cancel()

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise InvalidOperationError(
                operation=operation,
                current_state="closed",
                message=ErrorMessages.SESSION_CLOSED.format(guild_id=self.guild_id),
            )
