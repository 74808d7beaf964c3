"""RSS headline fetcher built on aiohttp and feedparser."""

import asyncio
import time
from typing import List, Optional

import aiohttp
import feedparser
import structlog

from .interfaces import FetcherInterface, NetworkError, ParseError
from ..config.settings import settings
from ..orchestration.cancellation import CancellationToken
from ..orchestration.pool import WorkerPool

logger = structlog.get_logger()


class RSSFetcher(FetcherInterface):
    """Async RSS fetcher returning item titles in document order."""

    def __init__(self, timeout_seconds: int = None, user_agent: str = None, pool: WorkerPool = None):
        self.session: Optional[aiohttp.ClientSession] = None
        self.pool = pool
        self.timeout_seconds = timeout_seconds or settings.fetch_timeout_seconds
        self.user_agent = user_agent or settings.user_agent

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            headers={"User-Agent": self.user_agent}
        )
        return self

    async def __aexit__(self, *args):
        if self.session:
            await self.session.close()
            self.session = None

    async def fetch_titles(self, source: str, token: CancellationToken) -> List[str]:
        """Fetch and parse one feed."""
        if self.session is None:
            raise RuntimeError("RSSFetcher must be used as an async context manager")

        token.raise_if_cancelled(source)
        start_time = time.time()

        try:
            content = await self._download(source)
            token.raise_if_cancelled(source)
            titles = await self._parse(source, content)
        except (NetworkError, ParseError) as e:
            elapsed_ms = int((time.time() - start_time) * 1000)
            logger.warning(
                "feed_fetch_failed",
                feed=source,
                error=str(e),
                error_type=type(e).__name__,
                time_ms=elapsed_ms
            )
            raise

        logger.info(
            "feed_fetched",
            feed=source,
            titles=len(titles),
            time_ms=int((time.time() - start_time) * 1000)
        )
        return titles

    async def _parse(self, source: str, content: bytes) -> List[str]:
        # feedparser is CPU-bound; keep it off the event loop.
        if self.pool is not None:
            return await self.pool.run_blocking(parse_titles, source, content)
        return await asyncio.to_thread(parse_titles, source, content)

    async def _download(self, source: str) -> bytes:
        try:
            async with self.session.get(source) as response:
                if response.status >= 400:
                    raise NetworkError(source, f"HTTP {response.status}")
                return await response.read()
        except asyncio.TimeoutError as e:
            raise NetworkError(source, f"timed out after {self.timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            raise NetworkError(source, f"{type(e).__name__}: {e}") from e


def parse_titles(source: str, content) -> List[str]:
    """Extract item titles from a feed document."""
    feed = feedparser.parse(content)

    if feed.bozo and not feed.entries:
        raise ParseError(source, f"malformed feed: {feed.bozo_exception}")
    if not feed.version and not feed.entries:
        raise ParseError(source, "document is not a recognised feed format")

    titles = []
    for index, entry in enumerate(feed.entries):
        title = entry.get("title")
        if title is None:
            raise ParseError(source, f"item {index} has no title")
        titles.append(title)

    return titles
