"""Ordered track queue owned by a single guild session."""

from __future__ import annotations

import random
from collections import deque
from collections.abc import Iterable, Iterator

from guild_playback.domain.music.entities import Track


class TrackQueue:
    """Ordered sequence of tracks; entry 0 is the head.

    Once playback has started the head is the now-playing track and is
    never moved by ``append(to_front=True)`` or ``shuffle_remaining``.
    Not thread-safe on its own; the owning session serializes access.
    """

    def __init__(self) -> None:
        self._entries: deque[Track] = deque()
        self._head_playing = False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Track]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"TrackQueue(len={len(self._entries)}, head_playing={self._head_playing})"

    @property
    def head(self) -> Track | None:
        return self._entries[0] if self._entries else None

    @property
    def now_playing(self) -> Track | None:
        """The head, but only while it is marked as playing."""
        return self.head if self._head_playing else None

    @property
    def upcoming(self) -> list[Track]:
        """Entries after the playing head (all entries when nothing plays)."""
        entries = list(self._entries)
        return entries[1:] if self._head_playing else entries

    def append(self, tracks: Iterable[Track], *, to_front: bool = False) -> int:
        """Add tracks keeping their relative order.

        With ``to_front`` the tracks go immediately after the playing head,
        or to position 0 when nothing is playing. Returns the count added.
        """
        batch = list(tracks)
        if not batch:
            return 0

        if not to_front:
            self._entries.extend(batch)
            return len(batch)

        insert_at = 1 if self._head_playing else 0
        for offset, track in enumerate(batch):
            self._entries.insert(insert_at + offset, track)
        return len(batch)

    def start(self) -> Track | None:
        """Mark the head as playing and return it; None on an empty queue."""
        self._head_playing = bool(self._entries)
        return self.now_playing

    def advance(self) -> Track | None:
        """Remove and return the head, promoting the next entry to playing."""
        if not self._entries:
            self._head_playing = False
            return None

        finished = self._entries.popleft()
        self._head_playing = self._head_playing and bool(self._entries)
        return finished

    def shuffle_remaining(self, rng: random.Random | None = None) -> int:
        """Uniformly shuffle every entry except the playing head.

        Returns the number of entries that took part in the shuffle.
        """
        rng = rng or random.Random()
        remaining = self.upcoming
        rng.shuffle(remaining)

        if self._head_playing:
            head = self._entries[0]
            self._entries = deque([head, *remaining])
        else:
            self._entries = deque(remaining)
        return len(remaining)

    def clear(self) -> int:
        """Drop every entry and return the count removed."""
        count = len(self._entries)
        self._entries.clear()
        self._head_playing = False
        return count
