"""Bounded worker pool on which fetch tasks run."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from functools import lru_cache, partial
from typing import Callable, Optional

import structlog

logger = structlog.get_logger()


class WorkerPool:
    """Explicitly sized pool bounding how many fetches run at once.

    Admission is bounded by a semaphore; blocking fetch callables run on a
    thread executor of the same size. The pool starts lazily on first use
    and must be shut down explicitly.
    """

    def __init__(self, size: int, name: str = "headlines-io"):
        if size < 1:
            raise ValueError(f"worker pool size must be >= 1, got {size}")
        self.size = size
        self.name = name
        self.active = 0
        self.peak = 0
        self._executor: Optional[ThreadPoolExecutor] = None
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._closed = False

    @property
    def started(self) -> bool:
        return self._executor is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> "WorkerPool":
        if self._closed:
            raise RuntimeError(f"worker pool {self.name} is shut down")
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.size, thread_name_prefix=self.name
            )
            logger.debug("worker_pool_started", pool=self.name, size=self.size)
        return self

    def shutdown(self, wait: bool = True):
        """Release all execution units. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
        self._semaphore = None
        self._loop = None
        logger.debug("worker_pool_shutdown", pool=self.name, peak=self.peak)

    async def __aenter__(self):
        return self.start()

    async def __aexit__(self, *args):
        self.shutdown()

    def _admission(self) -> asyncio.Semaphore:
        # Semaphores bind to one event loop; a new loop gets a fresh one.
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._loop is not loop:
            self._semaphore = asyncio.Semaphore(self.size)
            self._loop = loop
        return self._semaphore

    @asynccontextmanager
    async def slot(self):
        """Hold one of the pool's execution slots for the duration."""
        self.start()
        async with self._admission():
            self.active += 1
            self.peak = max(self.peak, self.active)
            try:
                yield
            finally:
                self.active -= 1

    async def run_blocking(self, fn: Callable, *args, **kwargs):
        """Run a blocking callable on the pool's threads."""
        self.start()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(fn, *args, **kwargs))


@lru_cache(maxsize=1)
def get_worker_pool() -> WorkerPool:
    """Get the process-wide worker pool, sized from settings."""
    from ..config.settings import settings
    pool = WorkerPool(settings.worker_pool_size)
    logger.info("using_shared_worker_pool", size=pool.size)
    return pool.start()


def shutdown_worker_pool(wait: bool = True):
    """Tear down the process-wide worker pool, if one was created."""
    if get_worker_pool.cache_info().currsize:
        get_worker_pool().shutdown(wait=wait)
    get_worker_pool.cache_clear()
