"""Feed ingestion service.

One ingestion step polls a single feed: the one fetched longest ago.
"""

import uuid
from datetime import datetime, timedelta, timezone

import structlog
from pydantic import BaseModel, Field

from gator.exceptions import DuplicateError, FetchError, StorageError
from gator.models.feed import Feed
from gator.models.rss import FeedItem
from gator.sources.base import FeedFetcher
from gator.storage.base import GatorStorage
from gator.utils.dates import parse_published

logger = structlog.get_logger()


class IngestResult(BaseModel):
    """Outcome of one ingestion step."""

    feed: Feed
    items_seen: int = 0
    posts_new: int = 0
    posts_duplicate: int = 0
    items_failed: int = 0
    fetched_at: datetime = Field(..., description="Timestamp recorded on the feed")


class IngestService:
    """Fetches feeds and stores their items as posts."""

    def __init__(self, storage: GatorStorage, fetcher: FeedFetcher):
        self._storage = storage
        self._fetcher = fetcher

    async def ingest_one_feed(self) -> IngestResult:
        """Poll the next due feed and store its new items.

        The feed is marked as fetched before its content is requested.
        Reason: a slow or failing fetch must not make it the next pick again.
        This only holds with a single scheduler per database.

        Returns:
            Counts for the polled feed.

        Raises:
            NoFeedsError: If there are no feeds.
            FetchError: If the feed could not be fetched or parsed.
            StorageError: If the feed could not be selected or marked.
        """
        feed = await self._storage.get_next_feed_to_fetch()
        log = logger.bind(feed=feed.name, url=feed.url)

        fetched_at = self._next_fetch_time(feed)
        await self._storage.mark_feed_fetched(feed.id, fetched_at)

        try:
            parsed = await self._fetcher.fetch(feed.url)
        except FetchError as e:
            log.warning("Feed fetch failed", kind=e.kind, error=str(e))
            raise

        result = IngestResult(feed=feed, items_seen=len(parsed.items), fetched_at=fetched_at)
        for item in parsed.items:
            await self._store_item(feed, item, result, log)

        log.info(
            "Feed collected",
            items=result.items_seen,
            new=result.posts_new,
            duplicate=result.posts_duplicate,
            failed=result.items_failed,
        )
        return result

    async def _store_item(
        self,
        feed: Feed,
        item: FeedItem,
        result: IngestResult,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        if not item.link:
            log.warning("Skipping item without link", title=item.title)
            result.items_failed += 1
            return

        try:
            await self._storage.create_post(
                id=uuid.uuid4(),
                title=item.title,
                url=item.link,
                description=item.description,
                published_at=parse_published(item.published_at_raw),
                feed_id=feed.id,
            )
        except DuplicateError:
            result.posts_duplicate += 1
        except StorageError as e:
            log.error("Couldn't create post", post_url=item.link, error=str(e))
            result.items_failed += 1
        else:
            result.posts_new += 1

    def _next_fetch_time(self, feed: Feed) -> datetime:
        # last_fetched_at must strictly increase even if the clock has not.
        now = datetime.now(timezone.utc)
        previous = feed.last_fetched_at
        if previous is not None and now <= previous:
            return previous + timedelta(microseconds=1)
        return now
