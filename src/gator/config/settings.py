"""Configuration management using pydantic-settings.

Supports environment variables and .env file loading.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration.

    Every field can be overridden by an environment variable of the same
    name (e.g. ``DB_PATH=/tmp/gator.db``).
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),  # .env.local overrides .env
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "gator"
    log_level: str = "INFO"
    log_json: bool = False

    # Database
    db_path: Path = Field(
        default=Path.home() / ".gator" / "gator.db",
        description="SQLite database path",
    )

    # Session
    config_file: Path = Field(
        default=Path.home() / ".gatorconfig.json",
        description="JSON file holding the logged-in user name",
    )

    # RSS
    rss_fetch_timeout: int = Field(default=30, ge=1)
    rss_user_agent: str = "Gator"

    # Commands
    browse_default_limit: int = Field(default=2, ge=1)


# Global singleton instance
settings = Settings()
