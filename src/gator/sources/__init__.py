"""Sources package."""

from gator.sources.base import FeedFetcher
from gator.sources.rss import RSSFeedFetcher

__all__ = [
    "FeedFetcher",
    "RSSFeedFetcher",
]
