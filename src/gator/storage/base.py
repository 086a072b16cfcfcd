"""Abstract storage interface using Protocol.

Defines the contract for the relational store behind Gator.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from gator.models.feed import Feed, FeedFollowDetail, FeedWithOwner
from gator.models.post import Post, PostWithFeed
from gator.models.user import User


class GatorStorage(Protocol):
    """Gator storage abstraction protocol.

    Lookups raise NotFoundError instead of returning None, and unique
    constraint collisions raise DuplicateError. Any other backend failure
    is raised as StorageError.
    """

    async def initialize(self) -> None:
        """Initialize the storage (create tables, etc.)."""
        ...

    async def reset_all(self) -> None:
        """Delete every user, feed, follow and post."""
        ...

    async def create_user(
        self,
        id: UUID,
        created_at: datetime,
        updated_at: datetime,
        name: str,
    ) -> User:
        """Create a user.

        Raises:
            DuplicateError: If the name is taken.
        """
        ...

    async def get_user(self, name: str) -> User:
        """Get a user by name.

        Raises:
            NotFoundError: If no such user exists.
        """
        ...

    async def get_user_by_id(self, user_id: UUID) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If no such user exists.
        """
        ...

    async def get_users(self) -> list[User]:
        """List all users ordered by name."""
        ...

    async def create_feed(
        self,
        id: UUID,
        created_at: datetime,
        updated_at: datetime,
        name: str,
        url: str,
        user_id: UUID,
    ) -> Feed:
        """Create a feed owned by ``user_id``.

        Raises:
            DuplicateError: If a feed with the same URL exists.
        """
        ...

    async def get_feeds(self) -> list[FeedWithOwner]:
        """List all feeds with their owner's name."""
        ...

    async def get_feed_by_url(self, url: str) -> Feed:
        """Get a feed by URL.

        Raises:
            NotFoundError: If no feed has this URL.
        """
        ...

    async def create_feed_follow(
        self,
        id: UUID,
        user_id: UUID,
        feed_id: UUID,
    ) -> FeedFollowDetail:
        """Make ``user_id`` follow ``feed_id``.

        Raises:
            DuplicateError: If the user already follows the feed.
            NotFoundError: If the user or feed does not exist.
        """
        ...

    async def get_feed_follows_for_user(self, user_id: UUID) -> list[FeedFollowDetail]:
        """List the feeds a user follows, ordered by feed name."""
        ...

    async def unfollow_feed(self, user_id: UUID, feed_id: UUID) -> None:
        """Remove a follow.

        Raises:
            NotFoundError: If the user does not follow the feed.
        """
        ...

    async def get_next_feed_to_fetch(self) -> Feed:
        """Get the feed polled longest ago, never-polled feeds first.

        Raises:
            NoFeedsError: If there are no feeds.
        """
        ...

    async def mark_feed_fetched(self, feed_id: UUID, at: datetime) -> None:
        """Record that a feed was polled at ``at``."""
        ...

    async def create_post(
        self,
        id: UUID,
        title: str,
        url: str,
        description: str | None,
        published_at: datetime | None,
        feed_id: UUID,
    ) -> Post:
        """Store a post.

        Raises:
            DuplicateError: If a post with the same URL exists.
        """
        ...

    async def get_posts_for_user(self, user_id: UUID, limit: int) -> list[PostWithFeed]:
        """Get posts from followed feeds, newest first, undated last."""
        ...

    async def close(self) -> None:
        """Close the storage connection."""
        ...
