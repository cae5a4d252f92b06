"""Rate-limited, coalescing progress notifier with a guaranteed final flush."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ...domain.shared.messages import LogTemplates
from .resolution_models import ProgressReport

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressReport], Awaitable[None]]

DEFAULT_PROGRESS_INTERVAL = 5.0


class ProgressThrottle:
    """Delivers at most one progress report per interval.

    The first report fires immediately (leading edge). Reports arriving
    inside the window, or while a delivery is still running, replace one
    another and the latest fires when the window closes (trailing edge).
    ``finish`` supersedes anything pending and delivers the terminal report
    exactly once.
    """

    def __init__(self, callback: ProgressCallback, interval: float = DEFAULT_PROGRESS_INTERVAL) -> None:
        self._callback = callback
        self._interval = interval
        self._pending: ProgressReport | None = None
        self._last_fired: float | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._inflight: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def notify(self, report: ProgressReport) -> None:
        """Offer a report; it may fire now, later, or be replaced by a newer one."""
        if self._closed:
            return
        self._pending = report
        if self._inflight is not None or self._timer is not None:
            return
        self._schedule()

    async def finish(self, report: ProgressReport) -> bool:
        """Deliver the terminal report once; later calls are no-ops.

        Waits for an in-flight delivery so the terminal report is always
        the last one the callback sees. Returns whether it was delivered.
        """
        if self._closed:
            return False
        self._closed = True
        self._cancel_timer()
        self._pending = None

        inflight = self._inflight
        if inflight is not None and not inflight.done():
            await asyncio.wait({inflight})

        self._last_fired = asyncio.get_running_loop().time()
        await self._deliver(report)
        return True

    def cancel(self) -> None:
        """Stop without a terminal report; nothing fires afterwards."""
        self._closed = True
        self._cancel_timer()
        self._pending = None
        if self._inflight is not None:
            self._inflight.cancel()
            self._inflight = None

    def _schedule(self) -> None:
        loop = asyncio.get_running_loop()
        if self._last_fired is None:
            wait = 0.0
        else:
            wait = self._last_fired + self._interval - loop.time()

        if wait <= 0:
            self._flush()
        else:
            self._timer = loop.call_later(wait, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        if self._closed or self._pending is None or self._inflight is not None:
            return
        self._flush()

    def _flush(self) -> None:
        report, self._pending = self._pending, None
        if report is None:
            return
        self._last_fired = asyncio.get_running_loop().time()
        self._inflight = asyncio.ensure_future(self._deliver(report))
        self._inflight.add_done_callback(self._on_delivered)

    def _on_delivered(self, task: asyncio.Task[None]) -> None:
        if self._inflight is task:
            self._inflight = None
        if not self._closed and self._pending is not None and self._timer is None:
            self._schedule()

    async def _deliver(self, report: ProgressReport) -> None:
        try:
            await self._callback(report)
        except Exception as e:
            logger.warning(LogTemplates.PROGRESS_CALLBACK_FAILED, e)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
