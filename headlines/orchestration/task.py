"""A single in-flight fetch for one source."""

import asyncio
from typing import List, Optional, Tuple

from .cancellation import CancellationError, CancellationToken
from .interfaces import TaskOutcome, TaskState
from .pool import WorkerPool


class FetchTask:
    """One fetch attempt against a single source.

    The task settles exactly once, in COMPLETED, FAILED or CANCELLED.
    Errors raised by the fetcher are stored verbatim, never raised out of
    the task's driver.
    """

    def __init__(self, source: str, fetcher, pool: WorkerPool, token: CancellationToken):
        self.source = source
        self.state = TaskState.PENDING
        self.result: Optional[Tuple[str, ...]] = None
        self.error: Optional[BaseException] = None
        self._fetcher = fetcher
        self._pool = pool
        self._token = token
        self._settled = asyncio.Event()
        self._driver: Optional[asyncio.Task] = None

    def __repr__(self):
        return f"FetchTask(source={self.source!r}, state={self.state.value})"

    @property
    def settled(self) -> bool:
        return self.state.is_terminal

    @property
    def driver(self) -> Optional[asyncio.Task]:
        return self._driver

    def start(self) -> "FetchTask":
        """Submit to the pool without waiting for admission."""
        if self._driver is not None:
            raise RuntimeError(f"task for {self.source} already started")
        self._driver = asyncio.create_task(self._run(), name=f"fetch:{self.source}")
        self._driver.add_done_callback(self._on_driver_done)
        return self

    def cancel(self, reason: str = "cancelled") -> bool:
        """Ask the driver to stop at its next suspension point."""
        if self.settled:
            return False
        if self._driver is None:
            self._settle(TaskState.CANCELLED, error=CancellationError(self.source, reason))
            return True
        return self._driver.cancel(reason)

    async def _run(self):
        try:
            async with self._pool.slot():
                # Settle while still holding the slot so waiters see the
                # outcome before the next queued task is admitted.
                try:
                    self._token.raise_if_cancelled(self.source)
                    self.state = TaskState.RUNNING
                    titles = await self._fetcher.fetch_titles(self.source, self._token)
                    result = tuple(titles)
                    self._token.raise_if_cancelled(self.source)
                except CancellationError as e:
                    self._settle(TaskState.CANCELLED, error=e)
                except Exception as e:
                    self._settle(TaskState.FAILED, error=e)
                else:
                    self._settle(TaskState.COMPLETED, result=result)
        except asyncio.CancelledError:
            if not self.settled:
                reason = self._token.reason or "cancelled"
                self._settle(TaskState.CANCELLED, error=CancellationError(self.source, reason))
            raise

    def _on_driver_done(self, driver: asyncio.Task):
        # A driver cancelled before its first step never enters _run.
        if not self.settled:
            reason = self._token.reason or "cancelled"
            self._settle(TaskState.CANCELLED, error=CancellationError(self.source, reason))

    def _settle(self, state: TaskState, result=None, error=None):
        if self.settled:
            raise RuntimeError(f"task for {self.source} already settled as {self.state.value}")
        self.result = result
        self.error = error
        self.state = state
        self._settled.set()

    async def await_result(self) -> List[str]:
        """Wait until terminal; raise the stored error unless completed."""
        await self._settled.wait()
        if self.state is TaskState.COMPLETED:
            return list(self.result)
        raise self.error

    async def await_settled(self) -> TaskOutcome:
        """Wait until terminal; never raises."""
        await self._settled.wait()
        return self.outcome()

    def outcome(self) -> TaskOutcome:
        if not self.settled:
            raise RuntimeError(f"task for {self.source} has not settled")
        return TaskOutcome(
            source=self.source,
            state=self.state,
            result=self.result,
            error=self.error,
        )
