"""Custom exceptions for Gator.

Provides a structured exception hierarchy for different error scenarios.
Every error a command can raise derives from GatorError, so the CLI can
report it and exit nonzero.
"""


class GatorError(Exception):
    """Base exception class for all Gator errors."""

    pass


class ValidationError(GatorError):
    """Raised when command arguments are missing or malformed."""

    pass


class BadIntervalError(ValidationError):
    """Raised when a polling interval string cannot be parsed.

    Attributes:
        value: The rejected interval string.
    """

    def __init__(self, value: str, message: str = "expected a duration like 30s, 1m or 1h30m"):
        self.value = value
        super().__init__(f"Invalid interval {value!r}: {message}")


class UnknownCommandError(GatorError):
    """Raised when no handler is registered under a command name.

    Attributes:
        name: The command name that was looked up.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown command: {name!r}")


class NotFoundError(GatorError):
    """Raised when a referenced user, feed or follow does not exist."""

    pass


class NoFeedsError(NotFoundError):
    """Raised when there is no feed to poll."""

    def __init__(self) -> None:
        super().__init__("No feeds to fetch")


class DuplicateError(GatorError):
    """Raised when an insert collides with a unique constraint.

    Attributes:
        entity: The kind of record being inserted (e.g., 'post').
        key: The value that collided.
    """

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} already exists: {key}")


class StorageError(GatorError):
    """Raised when database/storage operations fail."""

    pass


class ConfigError(GatorError):
    """Raised when the session config file cannot be read or written."""

    pass


class FetchError(GatorError):
    """Raised when a feed cannot be fetched or parsed.

    Attributes:
        url: The feed URL that failed.
    """

    kind = "fetch"
    action = "fetch"

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Failed to {self.action} {url}: {message}")


class TransportError(FetchError):
    """Raised when the HTTP request itself fails."""

    kind = "network"


class BodyError(FetchError):
    """Raised when the response body cannot be read or decoded."""

    kind = "body"


class ParseError(FetchError):
    """Raised when the feed document is not usable XML."""

    kind = "parse"
    action = "parse"
