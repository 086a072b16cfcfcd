"""Test configuration and fixtures."""

import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from structlog.testing import capture_logs

from gator.commands.router import State
from gator.config.session import MemorySession
from gator.config.settings import Settings
from gator.exceptions import FetchError
from gator.models.rss import ParsedFeed
from gator.parsers.rss_parser import RSSParser
from gator.storage.sqlite import SQLiteGatorStorage


class FakeFetcher:
    """Feed fetcher serving canned documents keyed by URL."""

    def __init__(self) -> None:
        self.documents: dict[str, bytes] = {}
        self.errors: dict[str, FetchError] = {}
        self.calls: list[str] = []
        self._parser = RSSParser()

    async def fetch(self, url: str) -> ParsedFeed:
        self.calls.append(url)
        if url in self.errors:
            raise self.errors[url]
        return self._parser.parse(self.documents[url], url)


def rss_document(*items: dict, title: str = "Example Blog") -> bytes:
    """Build an RSS 2.0 document from item dicts."""
    parts = []
    for item in items:
        fields = "".join(
            f"<{tag}>{item[key]}</{tag}>"
            for key, tag in (
                ("title", "title"),
                ("link", "link"),
                ("description", "description"),
                ("pubDate", "pubDate"),
            )
            if key in item
        )
        parts.append(f"<item>{fields}</item>")
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>{title}</title>
    <link>http://example.com/</link>
    <description>Posts from an example blog</description>
    {"".join(parts)}
  </channel>
</rss>""".encode()


@pytest.fixture(autouse=True)
def log_output():
    """Capture structlog events instead of printing them."""
    with capture_logs() as logs:
        yield logs


@pytest.fixture
def temp_db_path():
    """Create a temporary database path for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest_asyncio.fixture
async def storage(temp_db_path):
    """Initialized SQLite storage in a temporary directory."""
    store = SQLiteGatorStorage(temp_db_path)
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def session():
    return MemorySession()


@pytest.fixture
def state(storage, session, fetcher, temp_db_path):
    """Command state backed by temporary storage and an in-memory session."""
    settings = Settings(
        db_path=temp_db_path,
        config_file=temp_db_path.parent / "gatorconfig.json",
    )
    return State(settings=settings, storage=storage, session=session, fetcher=fetcher)


@pytest.fixture
def make_user(storage):
    async def _make_user(name: str):
        now = datetime.now(timezone.utc)
        return await storage.create_user(uuid.uuid4(), now, now, name)

    return _make_user


@pytest.fixture
def make_feed(storage):
    async def _make_feed(user, name: str, url: str, follow: bool = True):
        now = datetime.now(timezone.utc)
        feed = await storage.create_feed(uuid.uuid4(), now, now, name, url, user.id)
        if follow:
            await storage.create_feed_follow(uuid.uuid4(), user.id, feed.id)
        return feed

    return _make_feed


@pytest.fixture
def sample_rss_content():
    """Sample RSS 2.0 content with three items."""
    return rss_document(
        {
            "title": "Tom &amp;amp; Jerry",
            "link": "http://example.com/a",
            "description": "First &amp;lt;post&amp;gt;",
            "pubDate": "Mon, 02 Jan 2006 15:04:05 -0700",
        },
        {
            "title": "Second",
            "link": "http://example.com/b",
            "description": "Second post",
            "pubDate": "Tue, 03 Jan 2006 10:00:00 +0000",
        },
        {
            "title": "Third",
            "link": "http://example.com/c",
            "pubDate": "Wed, 04 Jan 2006 10:00:00 GMT",
        },
    )
