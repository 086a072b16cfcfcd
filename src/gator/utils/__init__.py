"""Utils package."""

from gator.utils.dates import parse_published
from gator.utils.durations import format_duration, parse_duration
from gator.utils.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "format_duration",
    "get_logger",
    "parse_duration",
    "parse_published",
]
