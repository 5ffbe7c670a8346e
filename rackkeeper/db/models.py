"""
SQLModel models for RackKeeper.

Local storage is a namespaced key/value table: each row holds one JSON
document (the recent-match list, the cached player stats, a cached league
report, ...).  Writers replace a whole document at a time.
"""

from datetime import datetime, timezone
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoredValue(SQLModel, table=True):
    __tablename__ = "stored_value"

    namespace: str = Field(default="default", primary_key=True)
    key: str = Field(primary_key=True)
    value: str  # JSON text
    updated_at: datetime = Field(default_factory=_utcnow)
