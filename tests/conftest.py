"""Pytest configuration and shared fixtures."""

import asyncio
from typing import Dict, List, Union

import pytest

# Add project root to path
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from headlines.ingestion.interfaces import FetcherInterface, NetworkError, ParseError
from headlines.orchestration.pool import WorkerPool


class StubFetcher(FetcherInterface):
    """Deterministic fetcher: fixed titles or a fixed error per source.

    Optional per-source delays make completion order differ from
    submission order. Tracks how many fetches run at once.
    """

    def __init__(
        self,
        outcomes: Dict[str, Union[List[str], Exception]],
        delays: Dict[str, float] = None,
        default_delay: float = 0.0,
    ):
        self.outcomes = outcomes
        self.delays = delays or {}
        self.default_delay = default_delay
        self.active = 0
        self.peak = 0
        self.started: List[str] = []
        self.completed: List[str] = []

    async def fetch_titles(self, source, token):
        self.started.append(source)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            delay = self.delays.get(source, self.default_delay)
            if delay:
                await asyncio.sleep(delay)
            token.raise_if_cancelled(source)
            outcome = self.outcomes[source]
            if isinstance(outcome, Exception):
                raise outcome
            self.completed.append(source)
            return list(outcome)
        finally:
            self.active -= 1


@pytest.fixture
def stub_fetcher_factory():
    """Build StubFetcher instances."""
    return StubFetcher


@pytest.fixture
def abc_outcomes():
    """A and B succeed, C fails with a network error."""
    return {
        "A": ["t1"],
        "B": ["t2", "t3"],
        "C": NetworkError("C", "connection refused"),
    }


@pytest.fixture
def parse_error():
    return ParseError("broken", "malformed feed")


@pytest.fixture
def pool():
    """Provide a started worker pool of size 2, shut down afterwards."""
    worker_pool = WorkerPool(2, name="test-pool").start()
    yield worker_pool
    worker_pool.shutdown()
