"""Adapter running synchronous fetch callables on the worker pool's threads."""

from typing import Callable, List

from .interfaces import FetcherInterface
from ..orchestration.cancellation import CancellationToken
from ..orchestration.pool import WorkerPool


class BlockingFetcher(FetcherInterface):
    """Wrap fn(source, token) -> titles so it runs off the event loop.

    A running thread cannot be interrupted; fn should poll
    token.raise_if_cancelled() between its own blocking steps.
    """

    def __init__(self, fn: Callable[[str, CancellationToken], List[str]], pool: WorkerPool):
        self.fn = fn
        self.pool = pool

    async def fetch_titles(self, source: str, token: CancellationToken) -> List[str]:
        token.raise_if_cancelled(source)
        return list(await self.pool.run_blocking(self.fn, source, token))
