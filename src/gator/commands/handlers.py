"""Command handlers and the router that maps command names to them."""

import asyncio
import re
import signal
import uuid
from contextlib import suppress
from datetime import datetime, timezone

import structlog

from gator.auth.middleware import require_login
from gator.commands.router import Command, CommandRouter, State
from gator.exceptions import ValidationError
from gator.models.user import User
from gator.scheduler import FeedScheduler
from gator.services.ingest_service import IngestService
from gator.utils.durations import format_duration, parse_duration

logger = structlog.get_logger()

# Posts are fetched with a 32-bit LIMIT
MAX_BROWSE_LIMIT = 2**31 - 1

_DIGITS = re.compile(r"[0-9]+")

DESCRIPTIONS: dict[str, str] = {
    "help": "Show available commands",
    "reset": "Delete all users, feeds and posts",
    "register": "Register a new user and log them in",
    "login": "Log in as an existing user",
    "users": "List all users",
    "agg": "Fetch feeds every <interval> (e.g. 30s, 1m) until stopped",
    "scrape": "Fetch the next due feed once",
    "addfeed": "Add a new feed and follow it (requires login)",
    "feeds": "List all feeds",
    "follow": "Follow a feed by URL (requires login)",
    "following": "List feeds you are following (requires login)",
    "unfollow": "Unfollow one or more feeds by URL (requires login)",
    "browse": "Show the newest posts from your feeds (requires login)",
}


def _expect_args(command: Command, count: int, usage: str) -> None:
    if len(command.args) != count:
        raise ValidationError(f"usage: {command.name} {usage}".rstrip())


async def handle_register(state: State, command: Command) -> None:
    _expect_args(command, 1, "<name>")
    now = datetime.now(timezone.utc)
    user = await state.storage.create_user(
        id=uuid.uuid4(),
        created_at=now,
        updated_at=now,
        name=command.args[0],
    )
    state.session.set_user(user.name)
    logger.info("User registered", user=user.name, user_id=str(user.id))
    print(f"User {user.name!r} created and logged in")


async def handle_login(state: State, command: Command) -> None:
    _expect_args(command, 1, "<name>")
    user = await state.storage.get_user(command.args[0])
    state.session.set_user(user.name)
    print(f"User {user.name!r} logged in successfully")


async def handle_reset(state: State, command: Command) -> None:
    _expect_args(command, 0, "")
    await state.storage.reset_all()
    logger.info("Database reset")
    print("Gator has been reset")


async def handle_users(state: State, command: Command) -> None:
    _expect_args(command, 0, "")
    current = state.session.current_user()
    for user in await state.storage.get_users():
        suffix = " (current)" if user.name == current else ""
        print(f"* {user.name}{suffix}")


async def handle_agg(state: State, command: Command) -> None:
    _expect_args(command, 1, "<interval>")
    interval = parse_duration(command.args[0])

    print(f"Collecting feeds every {format_duration(interval)}...")

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops
        with suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_event.set)

    scheduler = FeedScheduler(IngestService(state.storage, state.fetcher), interval)
    try:
        await scheduler.run(stop_event)
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            with suppress(NotImplementedError):
                loop.remove_signal_handler(sig)


async def handle_scrape(state: State, command: Command) -> None:
    _expect_args(command, 0, "")
    result = await IngestService(state.storage, state.fetcher).ingest_one_feed()
    print(
        f"Feed {result.feed.name!r} collected: {result.items_seen} items, "
        f"{result.posts_new} new, {result.posts_duplicate} already stored"
    )


async def handle_add_feed(state: State, command: Command, user: User) -> None:
    _expect_args(command, 2, "<name> <url>")
    name, url = command.args
    now = datetime.now(timezone.utc)
    feed = await state.storage.create_feed(
        id=uuid.uuid4(),
        created_at=now,
        updated_at=now,
        name=name,
        url=url,
        user_id=user.id,
    )
    await state.storage.create_feed_follow(id=uuid.uuid4(), user_id=user.id, feed_id=feed.id)
    logger.info("Feed added", feed=feed.name, url=feed.url, user=user.name)
    print(f"Feed {feed.name!r} added ({feed.url}), followed by {user.name}")


async def handle_feeds(state: State, command: Command) -> None:
    _expect_args(command, 0, "")
    for feed in await state.storage.get_feeds():
        print(f"* {feed.name}")
        print(f"  {feed.url}")
        print(f"  added by {feed.owner_name}")


async def handle_follow(state: State, command: Command, user: User) -> None:
    _expect_args(command, 1, "<url>")
    feed = await state.storage.get_feed_by_url(command.args[0])
    follow = await state.storage.create_feed_follow(
        id=uuid.uuid4(),
        user_id=user.id,
        feed_id=feed.id,
    )
    print(f"{follow.user_name} followed {follow.feed_name}")


async def handle_following(state: State, command: Command, user: User) -> None:
    _expect_args(command, 0, "")
    for follow in await state.storage.get_feed_follows_for_user(user.id):
        print(f"* {follow.feed_name}")


async def handle_unfollow(state: State, command: Command, user: User) -> None:
    if not command.args:
        raise ValidationError("usage: unfollow <url> [<url> ...]")

    for url in command.args:
        feed = await state.storage.get_feed_by_url(url)
        await state.storage.unfollow_feed(user_id=user.id, feed_id=feed.id)
        print(f"* Unfollowed {feed.name}")


async def handle_browse(state: State, command: Command, user: User) -> None:
    if len(command.args) > 1:
        raise ValidationError("usage: browse [limit]")

    limit = state.settings.browse_default_limit
    if command.args:
        raw_limit = command.args[0]
        if not _DIGITS.fullmatch(raw_limit):
            raise ValidationError(f"Invalid limit: {raw_limit!r}")
        limit = int(raw_limit)
        if not 1 <= limit <= MAX_BROWSE_LIMIT:
            raise ValidationError(f"Limit must be between 1 and {MAX_BROWSE_LIMIT}")

    posts = await state.storage.get_posts_for_user(user.id, limit)

    print(f"Found {len(posts)} posts for user {user.name}:")
    for post in posts:
        published = post.published_at
        when = f"{published:%a %b} {published.day}" if published else "Undated"
        print(f"{when} from {post.feed_name}")
        print(f"--- {post.title} ---")
        if post.description:
            print(f"    {post.description}")
        print(f"Link: {post.url}")
        print("=====================================")


async def handle_help(state: State, command: Command) -> None:
    print("Usage: gator <command> [args...]")
    print("================================")
    print("Available commands:")
    for name, description in DESCRIPTIONS.items():
        print(f"  {name:<10} - {description}")


def build_router() -> CommandRouter:
    """Create the router with every command registered."""
    router = CommandRouter()
    router.register("help", handle_help)
    router.register("reset", handle_reset)
    router.register("register", handle_register)
    router.register("login", handle_login)
    router.register("users", handle_users)
    router.register("agg", handle_agg)
    router.register("scrape", handle_scrape)
    router.register("addfeed", require_login(handle_add_feed))
    router.register("feeds", handle_feeds)
    router.register("follow", require_login(handle_follow))
    router.register("following", require_login(handle_following))
    router.register("unfollow", require_login(handle_unfollow))
    router.register("browse", require_login(handle_browse))
    return router
