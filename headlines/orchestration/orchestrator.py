"""Concurrent fetch orchestrator."""

import asyncio
import time
from typing import List, Optional, Sequence, Union

import structlog

from .cancellation import CancellationToken
from .interfaces import AggregationResult, Policy
from .policies import CompletionPolicy, get_policy
from .pool import WorkerPool, get_worker_pool
from .task import FetchTask

logger = structlog.get_logger()


class Orchestrator:
    """Fan a set of sources out over a worker pool and combine the titles.

    Every task spawned by aggregate() is settled before it returns, whether
    the policy finished normally, short-circuited, or the caller cancelled
    the aggregation itself. Per-task errors are never logged here; what the
    caller sees of them depends on the policy.
    """

    def __init__(self, fetcher, pool: Optional[WorkerPool] = None):
        self.fetcher = fetcher
        self.pool = pool or get_worker_pool()

    async def aggregate(
        self,
        sources: Sequence[str],
        policy: Union[Policy, str, CompletionPolicy],
        raise_on_abort: bool = True,
    ) -> AggregationResult:
        """Fetch titles from all sources concurrently under the given policy.

        Raises the triggering error when a FailFast aggregation aborts,
        unless raise_on_abort is False, in which case the aborted result
        is returned.
        """
        sources = list(sources)
        if not sources:
            raise ValueError("aggregate() requires at least one source")
        completion = get_policy(policy)
        if self.pool.closed:
            raise RuntimeError(f"worker pool {self.pool.name} is shut down")

        start = time.monotonic()
        token = CancellationToken()
        tasks = self._launch(sources, token)

        error = None
        try:
            error = await completion.wait(tasks, token)
        finally:
            await self._drain(tasks, token)

        result = completion.compose(tasks, error)
        logger.debug(
            "aggregation_finished",
            policy=completion.policy.value,
            sources=len(sources),
            succeeded=result.succeeded_count,
            failed=result.failed_count,
            aborted=result.aborted,
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )

        if result.aborted and raise_on_abort:
            raise result.error
        return result

    def _launch(self, sources: List[str], token: CancellationToken) -> List[FetchTask]:
        return [FetchTask(source, self.fetcher, self.pool, token).start() for source in sources]

    async def _drain(self, tasks: List[FetchTask], token: CancellationToken):
        """Cancel whatever has not settled and wait for every driver to exit."""
        if not all(t.settled for t in tasks):
            token.cancel(token.reason or "aggregation finished")
            for task in tasks:
                task.cancel(token.reason)
        drivers = [t.driver for t in tasks if t.driver is not None]
        await asyncio.gather(*drivers, return_exceptions=True)


async def aggregate_headlines(
    sources: Sequence[str],
    policy: Union[Policy, str],
    fetcher=None,
    pool: Optional[WorkerPool] = None,
    raise_on_abort: bool = True,
) -> AggregationResult:
    """Aggregate headlines with the RSS fetcher and the shared worker pool."""
    if fetcher is not None:
        return await Orchestrator(fetcher, pool).aggregate(sources, policy, raise_on_abort)

    from ..ingestion.fetcher import RSSFetcher

    pool = pool or get_worker_pool()
    async with RSSFetcher(pool=pool) as rss:
        return await Orchestrator(rss, pool).aggregate(sources, policy, raise_on_abort)
