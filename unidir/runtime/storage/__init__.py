"""Storage backends for the directory.

Provides the store interface and its in-memory and PostgreSQL implementations.
"""

from unidir.runtime.storage.base import DirectoryStore
from unidir.runtime.storage.memory import InMemoryDirectoryStore
from unidir.runtime.storage.postgres import PostgresDirectoryStore

__all__ = [
    "DirectoryStore",
    "InMemoryDirectoryStore",
    "PostgresDirectoryStore",
]
