"""Abstract feed fetcher interface using Protocol."""

from typing import Protocol

from gator.models.rss import ParsedFeed


class FeedFetcher(Protocol):
    """Retrieves and parses a feed by URL."""

    async def fetch(self, url: str) -> ParsedFeed:
        """Fetch and parse the feed at ``url``.

        Raises:
            FetchError: TransportError, BodyError or ParseError.
        """
        ...
