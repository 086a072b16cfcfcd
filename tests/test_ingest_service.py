"""Tests for the feed ingestion step."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from conftest import rss_document

from gator.exceptions import NoFeedsError, StorageError, TransportError
from gator.services.ingest_service import IngestService
from gator.storage.sqlite import SQLiteGatorStorage

FEED_URL = "http://example.com/rss"


@pytest_asyncio.fixture
async def alice_feed(make_user, make_feed):
    alice = await make_user("alice")
    feed = await make_feed(alice, "Blog", FEED_URL)
    return alice, feed


@pytest.mark.asyncio
async def test_ingest_stores_items(
    storage, fetcher, alice_feed, sample_rss_content, log_output
):
    alice, feed = alice_feed
    fetcher.documents[FEED_URL] = sample_rss_content

    result = await IngestService(storage, fetcher).ingest_one_feed()

    assert result.feed.id == feed.id
    assert (result.items_seen, result.posts_new, result.posts_duplicate) == (3, 3, 0)
    posts = await storage.get_posts_for_user(alice.id, limit=10)
    assert {p.url for p in posts} == {
        "http://example.com/a",
        "http://example.com/b",
        "http://example.com/c",
    }
    collected = [e for e in log_output if e["event"] == "Feed collected"]
    assert collected[0]["new"] == 3
    assert collected[0]["duplicate"] == 0


@pytest.mark.asyncio
async def test_ingest_twice_is_idempotent(storage, fetcher, alice_feed, sample_rss_content):
    alice, _ = alice_feed
    fetcher.documents[FEED_URL] = sample_rss_content
    service = IngestService(storage, fetcher)

    await service.ingest_one_feed()
    second = await service.ingest_one_feed()

    assert second.posts_new == 0
    assert second.posts_duplicate == 3
    assert second.items_failed == 0
    assert len(await storage.get_posts_for_user(alice.id, limit=10)) == 3


@pytest.mark.asyncio
async def test_duplicate_item_within_document_stored_once(storage, fetcher, alice_feed):
    alice, _ = alice_feed
    fetcher.documents[FEED_URL] = rss_document(
        {"title": "A", "link": "http://example.com/a"},
        {"title": "A", "link": "http://example.com/a"},
    )

    result = await IngestService(storage, fetcher).ingest_one_feed()

    assert result.items_seen == 2
    assert result.posts_new == 1
    posts = await storage.get_posts_for_user(alice.id, limit=10)
    assert [p.title for p in posts] == ["A"]


@pytest.mark.asyncio
async def test_published_dates(storage, fetcher, alice_feed, sample_rss_content):
    alice, _ = alice_feed
    fetcher.documents[FEED_URL] = sample_rss_content

    await IngestService(storage, fetcher).ingest_one_feed()

    posts = {p.url: p for p in await storage.get_posts_for_user(alice.id, limit=10)}
    assert posts["http://example.com/a"].published_at == datetime(
        2006, 1, 2, 22, 4, 5, tzinfo=timezone.utc
    )
    assert posts["http://example.com/a"].title == "Tom & Jerry"
    # "GMT" is not a numeric zone
    assert posts["http://example.com/c"].published_at is None


@pytest.mark.asyncio
async def test_last_fetched_strictly_advances(storage, fetcher, alice_feed, sample_rss_content):
    _, feed = alice_feed
    fetcher.documents[FEED_URL] = sample_rss_content
    service = IngestService(storage, fetcher)

    first = await service.ingest_one_feed()
    # Pretend the clock is behind the stored value
    future = datetime.now(timezone.utc) + timedelta(hours=1)
    await storage.mark_feed_fetched(feed.id, future)
    second = await service.ingest_one_feed()

    assert first.fetched_at < future < second.fetched_at
    stored = await storage.get_feed_by_url(FEED_URL)
    assert stored.last_fetched_at == second.fetched_at


@pytest.mark.asyncio
async def test_feed_marked_before_fetch_failure(storage, fetcher, make_user, make_feed):
    alice = await make_user("alice")
    broken = await make_feed(alice, "Broken", "http://broken.example.com/rss")
    working = await make_feed(alice, "Working", FEED_URL)
    fetcher.errors[broken.url] = TransportError(broken.url, "connection refused")
    fetcher.documents[FEED_URL] = rss_document({"title": "A", "link": "http://example.com/a"})
    service = IngestService(storage, fetcher)

    with pytest.raises(TransportError):
        await service.ingest_one_feed()

    assert (await storage.get_feed_by_url(broken.url)).last_fetched_at is not None
    assert await storage.get_posts_for_user(alice.id, limit=10) == []

    result = await service.ingest_one_feed()
    assert result.feed.id == working.id
    assert fetcher.calls == [broken.url, FEED_URL]


@pytest.mark.asyncio
async def test_ingest_without_feeds(storage, fetcher):
    with pytest.raises(NoFeedsError):
        await IngestService(storage, fetcher).ingest_one_feed()
    assert fetcher.calls == []


class FlakyStorage(SQLiteGatorStorage):
    """Storage that fails to insert one specific post URL."""

    failing_url = "http://example.com/b"

    async def create_post(self, id, title, url, description, published_at, feed_id):
        if url == self.failing_url:
            raise StorageError("disk I/O error")
        return await super().create_post(id, title, url, description, published_at, feed_id)


@pytest.mark.asyncio
async def test_item_failures_do_not_abort_step(
    temp_db_path, fetcher, storage, alice_feed, sample_rss_content
):
    alice, _ = alice_feed
    flaky = FlakyStorage(temp_db_path)
    await flaky.initialize()
    fetcher.documents[FEED_URL] = sample_rss_content

    result = await IngestService(flaky, fetcher).ingest_one_feed()

    assert (result.posts_new, result.items_failed) == (2, 1)
    urls = {p.url for p in await flaky.get_posts_for_user(alice.id, limit=10)}
    assert urls == {"http://example.com/a", "http://example.com/c"}


@pytest.mark.asyncio
async def test_items_without_link_are_skipped(storage, fetcher, alice_feed):
    fetcher.documents[FEED_URL] = rss_document(
        {"title": "No link"},
        {"title": "Linked", "link": "http://example.com/linked"},
    )

    result = await IngestService(storage, fetcher).ingest_one_feed()

    assert (result.posts_new, result.items_failed) == (1, 1)
