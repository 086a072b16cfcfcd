"""Abstract feed parser interface using Protocol."""

from typing import Protocol

from gator.models.rss import ParsedFeed


class FeedParser(Protocol):
    """RSS feed parser abstraction protocol."""

    def parse(self, raw_content: bytes | str, url: str) -> ParsedFeed:
        """Parse RSS content into a normalized feed.

        Args:
            raw_content: Raw XML from the feed source.
            url: Feed URL, used in error messages.

        Returns:
            The parsed channel and its items.

        Raises:
            ParseError: When the document is not usable.
        """
        ...
