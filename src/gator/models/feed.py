"""Feed and feed-follow data models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class Feed(BaseModel):
    """A subscribable RSS source, owned by the user who added it."""

    id: UUID
    name: str
    url: str = Field(..., description="Feed URL, unique across feeds")
    user_id: UUID = Field(..., description="Owner (the user who added the feed)")
    created_at: datetime
    updated_at: datetime
    last_fetched_at: datetime | None = Field(
        default=None,
        description="When the feed was last polled; None if never",
    )


class FeedWithOwner(Feed):
    """Feed joined with its owner's name, for listings."""

    owner_name: str


class FeedFollow(BaseModel):
    """A user's subscription to a feed."""

    id: UUID
    user_id: UUID
    feed_id: UUID
    created_at: datetime
    updated_at: datetime


class FeedFollowDetail(FeedFollow):
    """Feed follow joined with the user and feed names."""

    user_name: str
    feed_name: str
