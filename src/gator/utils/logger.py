"""structlog setup for the gator CLI."""

import logging
import sys

import structlog
from structlog.typing import Processor

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _level(name: str) -> int:
    name = name.upper()
    if name not in LEVELS:
        return logging.INFO
    return logging.getLevelName(name)


def _renderer(json_format: bool) -> Processor:
    if json_format:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def build_processors(json_format: bool = False) -> list[Processor]:
    """Return the processor chain ending in the chosen renderer.

    Reason: console and JSON output share every step except the last one, so
    switching formats never changes which fields an event carries.
    """
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_format:
        chain.append(structlog.processors.dict_tracebacks)
    else:
        chain.append(structlog.processors.format_exc_info)
    chain.append(_renderer(json_format))
    return chain


def configure_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """Send log events to stderr at ``log_level`` and above.

    Reason: stdout carries command output (``users``, ``browse``), which must
    stay parseable while ``agg`` logs every tick.
    """
    level = _level(log_level)
    # httpx and aiosqlite log through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    structlog.configure(
        processors=build_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    logger = structlog.get_logger()
    return logger.bind(logger=name) if name else logger
