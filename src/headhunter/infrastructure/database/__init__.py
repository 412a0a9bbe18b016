"""SQLite persistence backends"""

from .stores import Database, SqliteKeyValueStore, SqliteRowStore

__all__ = ["Database", "SqliteKeyValueStore", "SqliteRowStore"]
