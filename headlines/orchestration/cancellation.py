"""Cooperative cancellation shared by the tasks of one aggregation."""

import threading
from typing import Optional


class CancellationError(Exception):
    """Raised when a task is cancelled before it settles."""

    def __init__(self, source: Optional[str] = None, reason: str = "cancelled"):
        self.source = source
        self.reason = reason
        if source:
            super().__init__(f"{source}: {reason}")
        else:
            super().__init__(reason)


class CancellationToken:
    """Explicit cancellation signal polled by fetchers at checkpoints.

    Backed by a threading.Event so blocking fetchers running on worker
    threads can poll it as well as coroutines on the event loop.
    """

    def __init__(self):
        self._event = threading.Event()
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> bool:
        """Signal cancellation. Returns False if already cancelled."""
        if self._event.is_set():
            return False
        self._reason = reason
        self._event.set()
        return True

    def raise_if_cancelled(self, source: Optional[str] = None):
        """Checkpoint: raise CancellationError if cancellation was signalled."""
        if self._event.is_set():
            raise CancellationError(source, self._reason or "cancelled")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block the calling thread until cancelled or timeout elapses."""
        return self._event.wait(timeout)
