"""Storage protocols consumed by the recruiting pipeline"""

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Size-constrained string key/value store"""

    max_value_size: int

    def get(self, key: str) -> str | None:
        """Get a value, or None if absent or expired"""
        ...

    def get_all(self, keys: list[str]) -> dict[str, str]:
        """Get several values; absent keys are omitted"""
        ...

    def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Store a value, optionally expiring after ttl_seconds"""
        ...

    def remove(self, key: str) -> None:
        """Remove a value if present"""
        ...


class RowStore(Protocol):
    """Rectangular row block with snapshot support"""

    def read_rows(self) -> list[list[Any]]:
        """Read every data row"""
        ...

    def write_rows(self, rows: list[list[Any]]) -> None:
        """Replace the whole block"""
        ...

    def backup(self) -> None:
        """Snapshot the current block before a destructive overwrite"""
        ...
