"""SQLite storage implementation.

Provides async SQLite storage for users, feeds, follows and posts.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from uuid import UUID

import aiosqlite

from gator.exceptions import DuplicateError, NoFeedsError, NotFoundError, StorageError
from gator.models.feed import Feed, FeedFollowDetail, FeedWithOwner
from gator.models.post import Post, PostWithFeed
from gator.models.user import User


def _ts(value: datetime) -> str:
    """Serialize a timestamp so that string order matches time order."""
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _is_unique_violation(error: aiosqlite.IntegrityError) -> bool:
    return "UNIQUE constraint failed" in str(error)


class SQLiteGatorStorage:
    """SQLite-based storage implementation.

    Opens a connection per operation; foreign keys are enforced on each.

    Reason: SQLite only honours ON DELETE CASCADE when the pragma is set on
    the connection doing the delete, so every connection turns it on.
    """

    def __init__(self, db_path: Path):
        """Initialize SQLite storage.

        Args:
            db_path: Path to the SQLite database file.
        """
        self._db_path = db_path
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize database schema.

        Creates tables if they don't exist. Should be called once on startup.
        """
        if self._initialized:
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        schema_path = Path(__file__).parent / "migrations" / "init_schema.sql"
        schema_sql = schema_path.read_text()

        async with self._connect() as db:
            await db.executescript(schema_sql)
            await db.commit()

        self._initialized = True

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            async with aiosqlite.connect(self._db_path) as db:
                db.row_factory = aiosqlite.Row
                await db.execute("PRAGMA foreign_keys = ON")
                yield db
        except aiosqlite.Error as e:
            raise StorageError(f"Database error: {e}") from e

    async def reset_all(self) -> None:
        async with self._connect() as db:
            for table in ("posts", "feed_follows", "feeds", "users"):
                await db.execute(f"DELETE FROM {table}")
            await db.commit()

    # Users

    async def create_user(
        self,
        id: UUID,
        created_at: datetime,
        updated_at: datetime,
        name: str,
    ) -> User:
        async with self._connect() as db:
            try:
                await db.execute(
                    "INSERT INTO users (id, created_at, updated_at, name) VALUES (?, ?, ?, ?)",
                    (str(id), _ts(created_at), _ts(updated_at), name),
                )
            except aiosqlite.IntegrityError as e:
                if _is_unique_violation(e):
                    raise DuplicateError("user", name) from e
                raise
            await db.commit()
        return await self.get_user(name)

    async def get_user(self, name: str) -> User:
        async with self._connect() as db:
            async with db.execute("SELECT * FROM users WHERE name = ?", (name,)) as cursor:
                row = await cursor.fetchone()
        if row is None:
            raise NotFoundError(f"User {name!r} does not exist")
        return self._row_to_user(row)

    async def get_user_by_id(self, user_id: UUID) -> User:
        async with self._connect() as db:
            async with db.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)) as cursor:
                row = await cursor.fetchone()
        if row is None:
            raise NotFoundError(f"User {user_id} does not exist")
        return self._row_to_user(row)

    async def get_users(self) -> list[User]:
        async with self._connect() as db:
            async with db.execute("SELECT * FROM users ORDER BY name") as cursor:
                rows = await cursor.fetchall()
        return [self._row_to_user(row) for row in rows]

    # Feeds

    async def create_feed(
        self,
        id: UUID,
        created_at: datetime,
        updated_at: datetime,
        name: str,
        url: str,
        user_id: UUID,
    ) -> Feed:
        async with self._connect() as db:
            try:
                await db.execute(
                    """
                    INSERT INTO feeds (id, created_at, updated_at, name, url, user_id)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (str(id), _ts(created_at), _ts(updated_at), name, url, str(user_id)),
                )
            except aiosqlite.IntegrityError as e:
                if _is_unique_violation(e):
                    raise DuplicateError("feed", url) from e
                raise NotFoundError(f"User {user_id} does not exist") from e
            await db.commit()
        return await self.get_feed_by_url(url)

    async def get_feeds(self) -> list[FeedWithOwner]:
        async with self._connect() as db:
            async with db.execute(
                """
                SELECT feeds.*, users.name AS owner_name
                FROM feeds JOIN users ON users.id = feeds.user_id
                ORDER BY feeds.created_at
                """
            ) as cursor:
                rows = await cursor.fetchall()
        return [
            FeedWithOwner(**self._row_to_feed(row).model_dump(), owner_name=row["owner_name"])
            for row in rows
        ]

    async def get_feed_by_url(self, url: str) -> Feed:
        async with self._connect() as db:
            async with db.execute("SELECT * FROM feeds WHERE url = ?", (url,)) as cursor:
                row = await cursor.fetchone()
        if row is None:
            raise NotFoundError(f"No feed with URL {url}")
        return self._row_to_feed(row)

    async def get_next_feed_to_fetch(self) -> Feed:
        async with self._connect() as db:
            async with db.execute(
                """
                SELECT * FROM feeds
                ORDER BY last_fetched_at IS NOT NULL, last_fetched_at ASC, created_at ASC
                LIMIT 1
                """
            ) as cursor:
                row = await cursor.fetchone()
        if row is None:
            raise NoFeedsError()
        return self._row_to_feed(row)

    async def mark_feed_fetched(self, feed_id: UUID, at: datetime) -> None:
        async with self._connect() as db:
            cursor = await db.execute(
                "UPDATE feeds SET last_fetched_at = ?, updated_at = ? WHERE id = ?",
                (_ts(at), _ts(at), str(feed_id)),
            )
            await db.commit()
            if cursor.rowcount == 0:
                raise NotFoundError(f"Feed {feed_id} does not exist")

    # Feed follows

    async def create_feed_follow(
        self,
        id: UUID,
        user_id: UUID,
        feed_id: UUID,
    ) -> FeedFollowDetail:
        now = _ts(datetime.now(timezone.utc))
        async with self._connect() as db:
            try:
                await db.execute(
                    """
                    INSERT INTO feed_follows (id, created_at, updated_at, user_id, feed_id)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (str(id), now, now, str(user_id), str(feed_id)),
                )
            except aiosqlite.IntegrityError as e:
                if _is_unique_violation(e):
                    raise DuplicateError("feed follow", f"{user_id} -> {feed_id}") from e
                raise NotFoundError("Cannot follow: user or feed does not exist") from e
            await db.commit()

            async with db.execute(
                self._FOLLOW_DETAIL_SQL + " WHERE feed_follows.id = ?", (str(id),)
            ) as cursor:
                row = await cursor.fetchone()
        return self._row_to_follow(row)

    async def get_feed_follows_for_user(self, user_id: UUID) -> list[FeedFollowDetail]:
        async with self._connect() as db:
            async with db.execute(
                self._FOLLOW_DETAIL_SQL + " WHERE feed_follows.user_id = ? ORDER BY feeds.name",
                (str(user_id),),
            ) as cursor:
                rows = await cursor.fetchall()
        return [self._row_to_follow(row) for row in rows]

    async def unfollow_feed(self, user_id: UUID, feed_id: UUID) -> None:
        async with self._connect() as db:
            cursor = await db.execute(
                "DELETE FROM feed_follows WHERE user_id = ? AND feed_id = ?",
                (str(user_id), str(feed_id)),
            )
            await db.commit()
            if cursor.rowcount == 0:
                raise NotFoundError("Not following that feed")

    # Posts

    async def create_post(
        self,
        id: UUID,
        title: str,
        url: str,
        description: str | None,
        published_at: datetime | None,
        feed_id: UUID,
    ) -> Post:
        now = datetime.now(timezone.utc)
        post = Post(
            id=id,
            title=title,
            url=url,
            description=description,
            published_at=published_at,
            feed_id=feed_id,
            created_at=now,
            updated_at=now,
        )
        async with self._connect() as db:
            try:
                await db.execute(
                    """
                    INSERT INTO posts (
                        id, created_at, updated_at, title, url,
                        description, published_at, feed_id
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        str(post.id),
                        _ts(post.created_at),
                        _ts(post.updated_at),
                        post.title,
                        post.url,
                        post.description,
                        _ts(post.published_at) if post.published_at else None,
                        str(post.feed_id),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                if _is_unique_violation(e):
                    raise DuplicateError("post", url) from e
                raise
            await db.commit()
        return post

    async def get_posts_for_user(self, user_id: UUID, limit: int) -> list[PostWithFeed]:
        async with self._connect() as db:
            async with db.execute(
                """
                SELECT posts.*, feeds.name AS feed_name
                FROM posts
                JOIN feeds ON feeds.id = posts.feed_id
                JOIN feed_follows ON feed_follows.feed_id = feeds.id
                WHERE feed_follows.user_id = ?
                ORDER BY posts.published_at IS NULL, posts.published_at DESC
                LIMIT ?
                """,
                (str(user_id), limit),
            ) as cursor:
                rows = await cursor.fetchall()
        return [
            PostWithFeed(
                id=UUID(row["id"]),
                title=row["title"],
                url=row["url"],
                description=row["description"],
                published_at=_parse_ts(row["published_at"]),
                feed_id=UUID(row["feed_id"]),
                created_at=_parse_ts(row["created_at"]),
                updated_at=_parse_ts(row["updated_at"]),
                feed_name=row["feed_name"],
            )
            for row in rows
        ]

    async def close(self) -> None:
        """Close storage (no-op for SQLite as we use connection per operation)."""
        pass

    _FOLLOW_DETAIL_SQL = """
        SELECT feed_follows.*, users.name AS user_name, feeds.name AS feed_name
        FROM feed_follows
        JOIN users ON users.id = feed_follows.user_id
        JOIN feeds ON feeds.id = feed_follows.feed_id
    """

    def _row_to_user(self, row: aiosqlite.Row) -> User:
        return User(
            id=UUID(row["id"]),
            name=row["name"],
            created_at=_parse_ts(row["created_at"]),
            updated_at=_parse_ts(row["updated_at"]),
        )

    def _row_to_feed(self, row: aiosqlite.Row) -> Feed:
        return Feed(
            id=UUID(row["id"]),
            name=row["name"],
            url=row["url"],
            user_id=UUID(row["user_id"]),
            created_at=_parse_ts(row["created_at"]),
            updated_at=_parse_ts(row["updated_at"]),
            last_fetched_at=_parse_ts(row["last_fetched_at"]),
        )

    def _row_to_follow(self, row: aiosqlite.Row) -> FeedFollowDetail:
        return FeedFollowDetail(
            id=UUID(row["id"]),
            user_id=UUID(row["user_id"]),
            feed_id=UUID(row["feed_id"]),
            created_at=_parse_ts(row["created_at"]),
            updated_at=_parse_ts(row["updated_at"]),
            user_name=row["user_name"],
            feed_name=row["feed_name"],
        )
