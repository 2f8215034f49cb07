"""Store implementations."""

from kidcal.stores.json_file import JsonFileStore
from kidcal.stores.memory import MemoryStore
from kidcal.stores.sqlite import SqliteStore

__all__ = ["JsonFileStore", "MemoryStore", "SqliteStore"]
