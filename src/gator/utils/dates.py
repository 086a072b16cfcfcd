"""Publish-date parsing for RSS items."""

from datetime import datetime

# RFC 1123 with a numeric zone, e.g. "Mon, 02 Jan 2006 15:04:05 -0700".
RFC1123Z = "%a, %d %b %Y %H:%M:%S %z"


def parse_published(raw: str | None) -> datetime | None:
    """Parse an item's pubDate.

    Returns a timezone-aware datetime for RFC 1123 dates with a numeric
    zone offset, and None for anything else. Never raises.
    """
    if not raw:
        return None
    try:
        return datetime.strptime(raw.strip(), RFC1123Z)
    except ValueError:
        return None
