"""Storage package."""

from gator.storage.base import GatorStorage
from gator.storage.sqlite import SQLiteGatorStorage

__all__ = [
    "GatorStorage",
    "SQLiteGatorStorage",
]
