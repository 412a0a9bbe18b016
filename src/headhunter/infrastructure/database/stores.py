"""SQLite implementations of the key/value and row store protocols"""

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, col, create_engine, select

from headhunter.shared.constants import MAX_BACKUPS
from headhunter.shared.exceptions import StorageLimitError

from .models import KeyValueTable, SheetTable

BUSY_TIMEOUT_MS = 5000


class Database:
    """SQLite engine shared by the key/value and row stores

    An in-memory database keeps a single connection for its whole life so
    every session sees the same tables. File databases run in WAL mode.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)
        self.in_memory = self.db_path == ":memory:"
        engine_args: dict[str, Any] = {
            "connect_args": {"check_same_thread": False},
        }
        if self.in_memory:
            engine_args["poolclass"] = StaticPool
        self.engine = create_engine(f"sqlite:///{self.db_path}", **engine_args)
        event.listen(self.engine, "connect", self._on_connect)

        SQLModel.metadata.create_all(self.engine)
        logger.info(f"Database ready: {self.db_path}")

    def _on_connect(self, dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA busy_timeout = {BUSY_TIMEOUT_MS}")
        if not self.in_memory:
            cursor.execute("PRAGMA journal_mode = WAL")
        cursor.close()

    def get_session(self) -> Session:
        """New session; the caller commits"""
        return Session(self.engine)

    def close(self) -> None:
        self.engine.dispose()
        logger.info(f"Database closed: {self.db_path}")


class SqliteKeyValueStore:
    """Namespaced string store with optional TTL and a per-value size cap

    Two namespaces are used: a short-lived 'cache' (100KB values) and
    durable 'properties' (9KB values). Larger payloads go through
    the chunked wrappers in headhunter.infrastructure.cache.
    """

    def __init__(
        self,
        db: Database,
        namespace: str = "cache",
        max_value_size: int = 100_000,
    ):
        """Initialise store

        Args:
            db: Database instance
            namespace: Logical partition for keys
            max_value_size: Largest value accepted by put(), in characters
        """
        self.db = db
        self.namespace = namespace
        self.max_value_size = max_value_size

    def _is_expired(self, row: KeyValueTable, now: float) -> bool:
        return row.expires_at is not None and row.expires_at <= now

    def get(self, key: str) -> str | None:
        with self.db.get_session() as session:
            row = session.get(KeyValueTable, (self.namespace, key))
            if row is None:
                return None
            if self._is_expired(row, time.time()):
                session.delete(row)
                session.commit()
                return None
            return row.value

    def get_all(self, keys: list[str]) -> dict[str, str]:
        if not keys:
            return {}
        now = time.time()
        with self.db.get_session() as session:
            rows = session.exec(
                select(KeyValueTable).where(
                    KeyValueTable.namespace == self.namespace,
                    col(KeyValueTable.key).in_(keys),
                )
            ).all()
            return {
                row.key: row.value
                for row in rows
                if not self._is_expired(row, now)
            }

    def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Store a value

        Raises:
            StorageLimitError: If value exceeds max_value_size
        """
        if len(value) > self.max_value_size:
            raise StorageLimitError(
                f"Value for '{key}' is {len(value)} chars "
                f"(limit {self.max_value_size})"
            )

        expires_at = time.time() + ttl_seconds if ttl_seconds else None
        with self.db.get_session() as session:
            row = session.get(KeyValueTable, (self.namespace, key))
            if row is None:
                row = KeyValueTable(
                    namespace=self.namespace,
                    key=key,
                    value=value,
                    expires_at=expires_at,
                )
            else:
                row.value = value
                row.expires_at = expires_at
            session.add(row)
            session.commit()

    def remove(self, key: str) -> None:
        with self.db.get_session() as session:
            row = session.get(KeyValueTable, (self.namespace, key))
            if row is not None:
                session.delete(row)
                session.commit()


class SqliteRowStore:
    """Named row block with rolling backups ('Backup 1 <name>' .. 'Backup 5 <name>')"""

    def __init__(self, db: Database, name: str, max_backups: int = MAX_BACKUPS):
        self.db = db
        self.name = name
        self.max_backups = max_backups

    def backup_name(self, index: int) -> str:
        return f"Backup {index} {self.name}"

    def _read(self, name: str) -> list[list[Any]] | None:
        with self.db.get_session() as session:
            sheet = session.get(SheetTable, name)
            if sheet is None:
                return None
            try:
                rows = json.loads(sheet.rows_json)
            except json.JSONDecodeError:
                logger.warning(f"Corrupted sheet '{name}', treating as empty")
                return []
            return rows if isinstance(rows, list) else []

    def _write(self, name: str, rows: list[list[Any]]) -> None:
        payload = json.dumps(rows)
        with self.db.get_session() as session:
            sheet = session.get(SheetTable, name)
            if sheet is None:
                sheet = SheetTable(name=name)
            sheet.rows_json = payload
            sheet.updated_at = datetime.now(timezone.utc).isoformat()
            session.add(sheet)
            session.commit()

    def _rename(self, old: str, new: str) -> None:
        with self.db.get_session() as session:
            sheet = session.get(SheetTable, old)
            if sheet is None:
                return
            replacement = SheetTable(
                name=new, rows_json=sheet.rows_json, updated_at=sheet.updated_at
            )
            session.delete(sheet)
            existing = session.get(SheetTable, new)
            if existing is not None:
                session.delete(existing)
            session.flush()
            session.add(replacement)
            session.commit()

    def _drop(self, name: str) -> None:
        with self.db.get_session() as session:
            sheet = session.get(SheetTable, name)
            if sheet is not None:
                session.delete(sheet)
                session.commit()

    def read_rows(self) -> list[list[Any]]:
        return self._read(self.name) or []

    def write_rows(self, rows: list[list[Any]]) -> None:
        self._write(self.name, rows)
        logger.debug(f"Wrote {len(rows)} rows to '{self.name}'")

    def list_backups(self) -> list[str]:
        with self.db.get_session() as session:
            names = session.exec(
                select(SheetTable.name).where(
                    col(SheetTable.name).like(f"Backup % {self.name}")
                )
            ).all()
            return sorted(names)

    def backup(self) -> None:
        """Snapshot the sheet unless it matches the newest backup

        Failures are logged and never raised so a broken backup cannot
        block the write that follows.
        """
        try:
            current = self._read(self.name)
            if current is None:
                return

            latest = self._read(self.backup_name(1))
            if latest is not None and latest == current:
                logger.info(
                    "Pre-modification backup: skipped (sheet matches Backup 1)"
                )
                return

            logger.info(f"Creating new backup for '{self.name}'...")
            self._drop(self.backup_name(self.max_backups))
            for i in range(self.max_backups - 1, 0, -1):
                self._rename(self.backup_name(i), self.backup_name(i + 1))
            self._write(self.backup_name(1), current)
        except Exception as e:
            logger.warning(f"Backup failed for '{self.name}': {e}")
