"""
Key/value document store on SQLModel.

Rows are namespaced so unrelated caches can share one database.  Failures
are logged and reported to the caller instead of raised.
"""

from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy.engine import Engine as DbEngine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from .models import StoredValue

logger = logging.getLogger(__name__)


def create_db_engine(url: str) -> DbEngine:
    """Create a SQLAlchemy engine for ``url`` and make sure tables exist."""
    kwargs: dict[str, Any] = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory SQLite is per connection; share one across the pool.
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)
    SQLModel.metadata.create_all(engine)
    return engine


class KeyValueStore:
    """
    JSON documents keyed by string within a namespace.

    Failures are reported rather than raised: ``save`` returns False and
    ``load`` returns None, so callers can keep going on in-memory state.
    """

    def __init__(self, engine: DbEngine, namespace: str = "default") -> None:
        self.engine = engine
        self.namespace = namespace

    def _row(self, session: Session, key: str) -> Optional[StoredValue]:
        stmt = select(StoredValue).where(
            StoredValue.namespace == self.namespace, StoredValue.key == key
        )
        return session.exec(stmt).first()

    def save(self, key: str, value: Any) -> bool:
        try:
            text = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error("Cannot serialize %s/%s: %s", self.namespace, key, e)
            return False

        try:
            with Session(self.engine) as session:
                row = self._row(session, key)
                if row is None:
                    row = StoredValue(namespace=self.namespace, key=key, value=text)
                else:
                    row.value = text
                    row.updated_at = datetime.now(timezone.utc)
                session.add(row)
                session.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to save %s/%s: %s", self.namespace, key, e)
            return False
        return True

    def load(self, key: str) -> Optional[Any]:
        try:
            with Session(self.engine) as session:
                row = self._row(session, key)
                text = row.value if row is not None else None
        except SQLAlchemyError as e:
            logger.error("Failed to load %s/%s: %s", self.namespace, key, e)
            return None

        if text is None:
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            logger.warning("Discarding unreadable value at %s/%s: %s", self.namespace, key, e)
            return None

    def remove(self, key: str) -> None:
        try:
            with Session(self.engine) as session:
                row = self._row(session, key)
                if row is not None:
                    session.delete(row)
                    session.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to remove %s/%s: %s", self.namespace, key, e)

    def keys(self, prefix: str = "") -> List[str]:
        try:
            with Session(self.engine) as session:
                stmt = select(StoredValue.key).where(StoredValue.namespace == self.namespace)
                if prefix:
                    stmt = stmt.where(StoredValue.key.startswith(prefix, autoescape=True))
                return sorted(session.exec(stmt).all())
        except SQLAlchemyError as e:
            logger.error("Failed to list keys in %s: %s", self.namespace, e)
            return []

    def contains(self, key: str) -> bool:
        return self.load(key) is not None
