"""Parsers package."""

from gator.parsers.base import FeedParser
from gator.parsers.rss_parser import RSSParser

__all__ = [
    "FeedParser",
    "RSSParser",
]
