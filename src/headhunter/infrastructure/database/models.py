"""Persistence models (SQLModel tables)"""

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class KeyValueTable(SQLModel, table=True):
    """String values grouped by namespace ('cache', 'properties')"""

    __tablename__ = "key_values"

    namespace: str = Field(primary_key=True)
    key: str = Field(primary_key=True)
    value: str
    expires_at: float | None = None


class SheetTable(SQLModel, table=True):
    """Row block stored as a JSON array of rows"""

    __tablename__ = "sheets"

    name: str = Field(primary_key=True)
    rows_json: str = "[]"
    updated_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
