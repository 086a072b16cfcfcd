"""Configuration package."""

from gator.config.session import FileSession, MemorySession, SessionProvider
from gator.config.settings import Settings, settings

__all__ = [
    "FileSession",
    "MemorySession",
    "SessionProvider",
    "Settings",
    "settings",
]
