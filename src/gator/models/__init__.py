"""Models package."""

from gator.models.feed import Feed, FeedFollow, FeedFollowDetail, FeedWithOwner
from gator.models.post import Post, PostWithFeed
from gator.models.rss import FeedItem, ParsedFeed
from gator.models.user import User

__all__ = [
    "Feed",
    "FeedFollow",
    "FeedFollowDetail",
    "FeedItem",
    "FeedWithOwner",
    "ParsedFeed",
    "Post",
    "PostWithFeed",
    "User",
]
