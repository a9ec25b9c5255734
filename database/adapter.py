from __future__ import annotations

import json
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Optional, TypeVar

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from base import get_logger

from .connection import get_engine
from .errors import StaleWriteError, StorageError
from .models import Base, StoredValue

logger = get_logger(__name__)

T = TypeVar("T")


class KeyValueStore(ABC):
    """Durable JSON values under string keys.

    Every write bumps a per-key version starting at 1; an absent key reports
    version 0. Writers that pass ``expected_version`` get optimistic
    concurrency, everyone else gets last-writer-wins.
    """

    @abstractmethod
    def _read(self, key: str) -> Optional[tuple[str, int]]: ...

    @abstractmethod
    def _write(self, key: str, payload: str, expected_version: Optional[int]) -> int: ...

    @abstractmethod
    def remove(self, key: str) -> bool: ...

    def contains(self, key: str) -> bool:
        return self._read(key) is not None

    def get_versioned(self, key: str, fallback: T) -> tuple[T, int]:
        stored = self._read(key)
        if stored is None:
            return fallback, 0

        payload, version = stored
        try:
            return json.loads(payload), version
        except json.JSONDecodeError as e:
            logger.warning(f"Stored value for '{key}' is not valid JSON, using fallback: {e}")
            return fallback, version

    def get(self, key: str, fallback: T) -> T:
        value, _ = self.get_versioned(key, fallback)
        return value

    def set(self, key: str, value: Any, *, expected_version: Optional[int] = None) -> int:
        payload = json.dumps(value)
        return self._write(key, payload, expected_version)


class SqlKeyValueStore(KeyValueStore):
    def __init__(self, engine: Optional[Engine] = None) -> None:
        self._engine = engine or get_engine()
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            logger.exception(f"Error creating storage tables: {e}")
            raise StorageError("*", str(e)) from e

    @contextmanager
    def _session(self):
        with Session(self._engine) as session:
            yield session

    def _read(self, key: str) -> Optional[tuple[str, int]]:
        try:
            with self._session() as session:
                row = session.execute(
                    select(StoredValue.value, StoredValue.version).where(
                        StoredValue.key == key
                    )
                ).first()
        except SQLAlchemyError as e:
            logger.exception(f"Error reading '{key}': {e}")
            raise StorageError(key, str(e)) from e

        if row is None:
            return None
        return row.value, row.version

    def _write(self, key: str, payload: str, expected_version: Optional[int]) -> int:
        try:
            with self._session() as session:
                if expected_version == 0:
                    version = self._insert(session, key, payload)
                elif expected_version is None:
                    version = self._update(session, key, payload, None)
                    if version is None:
                        version = self._insert(session, key, payload)
                    if version is None:
                        version = self._update(session, key, payload, None)
                else:
                    version = self._update(session, key, payload, expected_version)

                if version is None:
                    actual_version = self._current_version(session, key)
                    raise StaleWriteError(key, expected_version, actual_version)
                return version
        except SQLAlchemyError as e:
            logger.exception(f"Error writing '{key}': {e}")
            raise StorageError(key, str(e)) from e

    def _update(
        self, session: Session, key: str, payload: str, expected_version: Optional[int]
    ) -> Optional[int]:
        """Compare-and-set: bump the row only if it still has ``expected_version``."""
        stmt = update(StoredValue).where(StoredValue.key == key)
        if expected_version is not None:
            stmt = stmt.where(StoredValue.version == expected_version)
        stmt = stmt.values(value=payload, version=StoredValue.version + 1)

        result = session.execute(stmt, execution_options={"synchronize_session": False})
        if result.rowcount == 0:
            session.rollback()
            return None

        version = self._current_version(session, key)
        session.commit()
        return version

    def _insert(self, session: Session, key: str, payload: str) -> Optional[int]:
        try:
            session.execute(insert(StoredValue).values(key=key, value=payload, version=1))
            session.commit()
        except IntegrityError:
            session.rollback()
            return None
        return 1

    def _current_version(self, session: Session, key: str) -> int:
        version = session.execute(
            select(StoredValue.version).where(StoredValue.key == key)
        ).scalar_one_or_none()
        return version or 0

    def remove(self, key: str) -> bool:
        try:
            with self._session() as session:
                result = session.execute(delete(StoredValue).where(StoredValue.key == key))
                session.commit()
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.exception(f"Error removing '{key}': {e}")
            raise StorageError(key, str(e)) from e


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store, mostly for tests. Values are kept serialized."""

    def __init__(self) -> None:
        self._values: dict[str, tuple[str, int]] = {}

    def _read(self, key: str) -> Optional[tuple[str, int]]:
        return self._values.get(key)

    def _write(self, key: str, payload: str, expected_version: Optional[int]) -> int:
        actual_version = self._values[key][1] if key in self._values else 0
        if expected_version is not None and expected_version != actual_version:
            raise StaleWriteError(key, expected_version, actual_version)

        self._values[key] = (payload, actual_version + 1)
        return actual_version + 1

    def remove(self, key: str) -> bool:
        return self._values.pop(key, None) is not None
