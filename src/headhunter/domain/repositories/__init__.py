"""Storage protocols"""

from .stores import KeyValueStore, RowStore

__all__ = ["KeyValueStore", "RowStore"]
