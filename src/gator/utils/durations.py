"""Parsing of human-friendly duration strings such as ``30s`` or ``1h30m``."""

import re
from datetime import timedelta

from gator.exceptions import BadIntervalError

# Seconds per unit, using the same unit names as Go's time.ParseDuration.
_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> timedelta:
    """Parse a duration string into a timedelta.

    Accepts a sequence of number+unit components, e.g. ``"1m"``,
    ``"1h30m"``, ``"1.5h"``, ``"500ms"``.

    Args:
        value: Duration string.

    Returns:
        The parsed duration.

    Raises:
        BadIntervalError: If the string is malformed or not positive.
    """
    text = value.strip()
    if not text:
        raise BadIntervalError(value)

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if not match:
            raise BadIntervalError(value)
        number, unit = match.groups()
        total += float(number) * _UNITS[unit]
        pos = match.end()

    try:
        duration = timedelta(seconds=total)
    except OverflowError as e:
        raise BadIntervalError(value, "interval too large") from e
    if duration <= timedelta(0):
        raise BadIntervalError(value, "interval must be positive")
    return duration


def format_duration(duration: timedelta) -> str:
    """Render a timedelta compactly, e.g. ``1h30m0s`` or ``500ms``."""
    total = duration.total_seconds()
    if total < 1:
        return f"{round(total * 1000)}ms"

    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    seconds_text = f"{seconds:g}s"
    if hours:
        return f"{int(hours)}h{int(minutes)}m{seconds_text}"
    if minutes:
        return f"{int(minutes)}m{seconds_text}"
    return seconds_text
