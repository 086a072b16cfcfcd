"""RSS 2.0 feed parser implementation."""

import html
from xml.sax import SAXParseException

import feedparser

from gator.exceptions import ParseError
from gator.models.rss import FeedItem, ParsedFeed


class RSSParser:
    """Parser for RSS 2.0 channels.

    Title and description text is HTML-unescaped after parsing, since
    feeds commonly double-encode entities (``&amp;amp;``). Links are left
    untouched.
    """

    def parse(self, raw_content: bytes | str, url: str) -> ParsedFeed:
        """Parse RSS content into a ParsedFeed.

        Args:
            raw_content: Raw XML from the feed source.
            url: Feed URL, used in error messages.

        Returns:
            The parsed channel and its items.

        Raises:
            ParseError: When the document is not usable.
        """
        try:
            feed = feedparser.parse(raw_content)
        except Exception as e:
            raise ParseError(url, f"Unexpected parse error: {e}") from e

        # feedparser recovers what it can from broken XML; a truncated feed
        # must not be half-ingested.
        if feed.bozo and isinstance(feed.get("bozo_exception"), SAXParseException):
            raise ParseError(url, f"Malformed XML: {feed.bozo_exception}")
        if not feed.get("version"):
            raise ParseError(url, "Not an RSS or Atom document")

        channel = feed.feed
        return ParsedFeed(
            title=self._text(channel.get("title")),
            link=channel.get("link", ""),
            description=self._text(channel.get("description", channel.get("subtitle"))),
            items=[self._parse_entry(entry) for entry in feed.entries],
        )

    def _parse_entry(self, entry: feedparser.FeedParserDict) -> FeedItem:
        return FeedItem(
            title=self._text(entry.get("title")),
            link=entry.get("link", "").strip(),
            description=self._text(entry.get("description", entry.get("summary"))),
            published_at_raw=entry.get("published", ""),
        )

    def _text(self, value: str | None) -> str:
        if not value:
            return ""
        return html.unescape(value).strip()
