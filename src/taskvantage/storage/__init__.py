"""Local persistence: SQLite key-value store and the collection repository."""

from taskvantage.storage.kv_store import KeyValueStore, StorageError
from taskvantage.storage.repository import DataRepository

__all__ = [
    "KeyValueStore",
    "StorageError",
    "DataRepository",
]
