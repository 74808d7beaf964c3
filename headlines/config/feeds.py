"""Feed configuration loader."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .settings import settings


@dataclass
class FeedConfig:
    """Configuration for a single feed."""
    name: str
    url: str
    enabled: bool = True


def load_feeds(config_path: str = None) -> List[FeedConfig]:
    """Load feed configurations from JSON file."""
    if config_path is None:
        config_path = settings.feeds_config_path

    with open(Path(config_path)) as f:
        data = json.load(f)

    feeds = []
    for feed_data in data.get("feeds", []):
        feeds.append(FeedConfig(
            name=feed_data.get("name", feed_data["url"]),
            url=feed_data["url"],
            enabled=feed_data.get("enabled", True),
        ))

    return feeds


def enabled_sources(feeds: List[FeedConfig]) -> List[str]:
    """URLs of enabled feeds, in file order."""
    return [f.url for f in feeds if f.enabled]
