"""Normalized RSS document models produced by the feed parser."""

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    """One ``<item>`` of an RSS channel."""

    title: str = ""
    link: str = ""
    description: str = ""
    published_at_raw: str = Field(
        default="",
        description="pubDate exactly as delivered; parsed during ingestion",
    )


class ParsedFeed(BaseModel):
    """An RSS channel with its items."""

    title: str = ""
    link: str = ""
    description: str = ""
    items: list[FeedItem] = Field(default_factory=list)
