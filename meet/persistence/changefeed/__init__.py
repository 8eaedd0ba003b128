"""Change feed implementations."""

from .inmemory import InMemoryChangeFeed
from .postgres import PostgresChangeFeed, notify_change

__all__ = [
    "InMemoryChangeFeed",
    "PostgresChangeFeed",
    "notify_change",
]
