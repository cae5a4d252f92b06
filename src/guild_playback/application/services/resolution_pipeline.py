"""Background resolution of search-query batches into queued tracks."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ...domain.music.value_objects import TrackVariant
from ...domain.shared.exceptions import InvalidOperationError, ResolutionFailedError
from ...domain.shared.messages import LogTemplates
from .progress_throttle import DEFAULT_PROGRESS_INTERVAL, ProgressCallback, ProgressThrottle
from .resolution_models import ProgressReport, ResolutionBatch

if TYPE_CHECKING:
    from ...application.interfaces.track_resolver import TrackResolver
    from ...domain.music.entities import Track
    from ...domain.music.registry import SessionRegistry
    from ...domain.music.session import GuildSession

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 5


class TrackResolutionPipeline:
    """Resolves a batch of queries and feeds the session as results arrive.

    Lookups run concurrently up to ``max_concurrency``, but tracks are
    enqueued in the order their queries were given: finished results are
    held back until every earlier query has finished too. Queries that
    fail are logged, counted and skipped.
    """

    def __init__(
        self,
        *,
        resolver: TrackResolver,
        registry: SessionRegistry,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        progress_interval: float = DEFAULT_PROGRESS_INTERVAL,
    ) -> None:
        self._resolver = resolver
        self._registry = registry
        self._max_concurrency = max(1, max_concurrency)
        self._progress_interval = progress_interval

    def start(
        self,
        queries: Iterable[str],
        session: GuildSession,
        on_progress: ProgressCallback,
        variant: TrackVariant = TrackVariant.YOUTUBE_VOD,
    ) -> asyncio.Task[ProgressReport]:
        """Launch resolution in the background and bind it to the session.

        The task returns the final report, or a partial one if the session
        was dropped from the registry mid-batch. Closing the session
        cancels it.
        """
        batch = ResolutionBatch(queries=list(queries))
        task = asyncio.create_task(
            self._run(batch, session, on_progress, variant),
            name=f"resolve-batch-{session.guild_id}",
        )
        session.attach_task(task)
        return task

    async def _run(
        self,
        batch: ResolutionBatch,
        session: GuildSession,
        on_progress: ProgressCallback,
        variant: TrackVariant,
    ) -> ProgressReport:
        throttle = ProgressThrottle(on_progress, self._progress_interval)
        semaphore = asyncio.Semaphore(self._max_concurrency)
        logger.info(LogTemplates.RESOLUTION_STARTED, batch.target, session.guild_id)

        async def resolve_one(index: int, query: str) -> tuple[int, Track | None]:
            async with semaphore:
                try:
                    return index, await self._resolver.resolve_query(query, variant)
                except ResolutionFailedError as e:
                    logger.warning(LogTemplates.RESOLUTION_FAILED, query, e)
                except Exception as e:
                    logger.exception(LogTemplates.RESOLUTION_FAILED, query, e)
                return index, None

        workers = [
            asyncio.ensure_future(resolve_one(index, query))
            for index, query in enumerate(batch.queries)
        ]
        buffered: dict[int, Track | None] = {}
        next_index = 0

        try:
            for next_done in asyncio.as_completed(workers):
                index, track = await next_done
                if track is None:
                    batch.record_failure(batch.queries[index])
                else:
                    batch.record_resolved()
                buffered[index] = track

                ready: list[Track] = []
                while next_index in buffered:
                    resolved = buffered.pop(next_index)
                    next_index += 1
                    if resolved is not None:
                        ready.append(resolved)

                if ready and not self._enqueue(session, ready):
                    logger.info(LogTemplates.RESOLUTION_SESSION_GONE, session.guild_id)
                    throttle.cancel()
                    return batch.snapshot()
                if ready:
                    batch.record_queued(len(ready))

                throttle.notify(batch.snapshot())
        except asyncio.CancelledError:
            throttle.cancel()
            raise
        finally:
            for worker in workers:
                if not worker.done():
                    worker.cancel()

        final = batch.snapshot(completed=True)
        logger.info(
            LogTemplates.RESOLUTION_COMPLETED, session.guild_id, final.queued, final.failed, final.total
        )
        await throttle.finish(final)
        return final

    def _enqueue(self, session: GuildSession, tracks: list[Track]) -> bool:
        if not self._registry.is_active(session):
            return False
        try:
            session.enqueue(tracks)
        except InvalidOperationError:
            return False
        return True
