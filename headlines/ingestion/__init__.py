"""Headline fetching - RSS and blocking fetchers."""

from .interfaces import FetchError, NetworkError, ParseError, FetcherInterface
from .fetcher import RSSFetcher, parse_titles
from .blocking import BlockingFetcher

__all__ = [
    "FetchError", "NetworkError", "ParseError", "FetcherInterface",
    "RSSFetcher", "parse_titles", "BlockingFetcher",
]
