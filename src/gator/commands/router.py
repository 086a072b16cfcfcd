"""Command routing: maps command names to async handlers."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import structlog

from gator.config.session import SessionProvider
from gator.config.settings import Settings
from gator.exceptions import UnknownCommandError
from gator.sources.base import FeedFetcher
from gator.storage.base import GatorStorage

logger = structlog.get_logger()


@dataclass
class State:
    """Everything a command handler may touch."""

    settings: Settings
    storage: GatorStorage
    session: SessionProvider
    fetcher: FeedFetcher


@dataclass
class Command:
    """A command name and its positional arguments."""

    name: str
    args: list[str] = field(default_factory=list)


Handler = Callable[[State, Command], Awaitable[None]]


class CommandRouter:
    """Exact-name lookup table from command name to handler."""

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, name: str, handler: Handler) -> None:
        """Register ``handler`` under ``name``, replacing any previous one."""
        if name in self._handlers:
            logger.debug("Replacing command handler", command=name)
        self._handlers[name] = handler

    def names(self) -> list[str]:
        return list(self._handlers)

    def __contains__(self, name: str) -> bool:
        return name in self._handlers

    async def run(self, state: State, command: Command) -> None:
        """Run the handler registered for ``command.name``.

        Raises:
            UnknownCommandError: If no handler is registered under the name.
        """
        handler = self._handlers.get(command.name)
        if handler is None:
            raise UnknownCommandError(command.name)
        await handler(state, command)
