"""Post data model."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class Post(BaseModel):
    """A feed item stored for browsing.

    Posts are created only by ingestion and never updated.
    """

    id: UUID
    title: str
    url: str = Field(..., description="Article URL, unique across posts")
    description: str | None = None
    published_at: datetime | None = None
    feed_id: UUID
    created_at: datetime
    updated_at: datetime


class PostWithFeed(Post):
    """Post joined with the name of the feed it came from."""

    feed_name: str
