"""Main application entry point.

Parses ``gator <command> [args...]``, wires up storage, session and the
feed fetcher, and dispatches to the command router.
"""

import argparse
import asyncio
import sys

from gator.commands.handlers import DESCRIPTIONS, build_router
from gator.commands.router import Command, State
from gator.config.session import FileSession
from gator.config.settings import Settings, settings
from gator.exceptions import GatorError, UnknownCommandError
from gator.sources.rss import RSSFeedFetcher
from gator.storage.sqlite import SQLiteGatorStorage
from gator.utils.logger import configure_logging, get_logger


def create_state(app_settings: Settings) -> State:
    """Build the command state from settings."""
    return State(
        settings=app_settings,
        storage=SQLiteGatorStorage(app_settings.db_path),
        session=FileSession(app_settings.config_file),
        fetcher=RSSFeedFetcher(
            timeout=app_settings.rss_fetch_timeout,
            user_agent=app_settings.rss_user_agent,
        ),
    )


async def run_command(state: State, command: Command) -> None:
    """Initialize storage and run a single command.

    Unknown commands are rejected before the database is touched.
    """
    router = build_router()
    if command.name not in router:
        raise UnknownCommandError(command.name)

    await state.storage.initialize()
    try:
        await router.run(state, command)
    finally:
        await state.storage.close()


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Process exit code: 0 on success, 1 on any command error.
    """
    parser = argparse.ArgumentParser(
        prog="gator",
        description="Gator - RSS feed aggregator",
        epilog="commands: " + ", ".join(DESCRIPTIONS),
    )
    parser.add_argument("command", help="Command to run (see 'gator help')")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Command arguments")
    parsed = parser.parse_args(argv)

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.log_json,
    )
    logger = get_logger("cli")

    command = Command(name=parsed.command, args=parsed.args)
    try:
        asyncio.run(run_command(create_state(settings), command))
    except GatorError as e:
        logger.debug("Command failed", command=command.name, error_type=type(e).__name__)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
