"""Interface definitions for headline fetching."""

from typing import List

from ..orchestration.cancellation import CancellationToken


class FetchError(Exception):
    """A fetch against one source failed."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class NetworkError(FetchError):
    """Transport failure: connection, timeout or HTTP error status."""


class ParseError(FetchError):
    """The fetched document is not a usable feed."""


class FetcherInterface:
    """Interface for headline fetching."""

    async def fetch_titles(self, source: str, token: CancellationToken) -> List[str]:
        """Fetch the ordered titles from a single source.

        Implementations poll token.raise_if_cancelled() at their checkpoints.
        """
        raise NotImplementedError
