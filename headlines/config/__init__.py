"""Settings and feed list."""

from .settings import Settings, settings
from .feeds import FeedConfig, load_feeds, enabled_sources

__all__ = ["Settings", "settings", "FeedConfig", "load_feeds", "enabled_sources"]
