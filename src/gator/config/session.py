"""Session storage for the logged-in user.

The session is a single user name. The CLI keeps it in a JSON config file
in the user's home directory; tests use the in-memory provider.
"""

from pathlib import Path
from typing import Protocol

import structlog
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from gator.exceptions import ConfigError

logger = structlog.get_logger()


class SessionProvider(Protocol):
    """Current-session capability used by the login middleware."""

    def current_user(self) -> str | None:
        """Return the logged-in user name, or None if nobody is logged in."""
        ...

    def set_user(self, name: str) -> None:
        """Make ``name`` the logged-in user."""
        ...

    def clear(self) -> None:
        """Log out."""
        ...


class GatorConfig(BaseModel):
    """On-disk layout of the config file.

    Unknown keys are preserved so that saving never drops settings
    written by other tools (e.g. ``db_url``).
    """

    model_config = ConfigDict(extra="allow")

    current_user_name: str | None = None


class FileSession:
    """Session backed by a JSON config file."""

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def current_user(self) -> str | None:
        return self._read().current_user_name or None

    def set_user(self, name: str) -> None:
        config = self._read()
        config.current_user_name = name
        self._write(config)
        logger.debug("Session updated", user=name, path=str(self._path))

    def clear(self) -> None:
        config = self._read()
        config.current_user_name = None
        self._write(config)

    def _read(self) -> GatorConfig:
        if not self._path.exists():
            return GatorConfig()
        try:
            return GatorConfig.model_validate_json(self._path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Cannot read {self._path}: {e}") from e
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid config file {self._path}: {e}") from e

    def _write(self, config: GatorConfig) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot write {self._path}: {e}") from e


class MemorySession:
    """In-memory session, lost when the process exits."""

    def __init__(self, user: str | None = None) -> None:
        self._user = user

    def current_user(self) -> str | None:
        return self._user

    def set_user(self, name: str) -> None:
        self._user = name

    def clear(self) -> None:
        self._user = None
