#!/usr/bin/env python3
"""Fetch headlines from all configured feeds and print a summary."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog

from headlines.config import settings, load_feeds, enabled_sources
from headlines.orchestration import (
    Orchestrator, Policy, WorkerPool, AggregationResult
)
from headlines.ingestion import RSSFetcher

logger = structlog.get_logger()


def configure_logging(level: str):
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        )
    )


async def run(sources, policy: Policy, pool_size: int) -> AggregationResult:
    async with WorkerPool(pool_size) as pool:
        async with RSSFetcher(pool=pool) as fetcher:
            return await Orchestrator(fetcher, pool).aggregate(sources, policy)


def render(result: AggregationResult, list_titles: bool):
    print(f"Found {len(result.titles)} News")

    if result.failures:
        print(f"\nFailed sources ({result.failed_count}/{result.total}):")
        for failure in result.failures:
            print(f"  {failure.source}: {failure.error}")
    elif result.has_failures:
        print(f"\n{result.failed_count} of {result.total} sources did not respond")

    if list_titles:
        print()
        for title in result.titles:
            print(f"  - {title}")


def main():
    parser = argparse.ArgumentParser(
        description="Aggregate headlines from several RSS feeds concurrently"
    )
    parser.add_argument("sources", nargs="*", help="Feed URLs (default: enabled feeds from --feeds)")
    parser.add_argument(
        "--policy", "-p",
        choices=[p.value for p in Policy],
        default=settings.default_policy,
        help="How failures of individual feeds are handled"
    )
    parser.add_argument("--feeds", default=None, help="Path to feeds.json")
    parser.add_argument("--pool-size", type=int, default=settings.worker_pool_size, help="Concurrent fetches")
    parser.add_argument("--list-titles", "-l", action="store_true", help="Print every title")
    args = parser.parse_args()

    configure_logging(settings.log_level)

    sources = args.sources or enabled_sources(load_feeds(args.feeds))
    if not sources:
        print("No feeds configured", file=sys.stderr)
        sys.exit(2)

    try:
        result = asyncio.run(run(sources, Policy(args.policy), args.pool_size))
    except Exception as e:
        logger.error("aggregation_aborted", policy=args.policy, error=str(e), error_type=type(e).__name__)
        print(f"Aborted: {e}", file=sys.stderr)
        sys.exit(1)

    for failure in result.failures:
        logger.warning("source_failed", feed=failure.source, error=str(failure.error))

    render(result, args.list_titles)


if __name__ == "__main__":
    main()
