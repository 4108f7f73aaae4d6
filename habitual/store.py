"""Key-value blob store and the two repositories built on it.

Each collection lives as one JSON blob under a fixed key. The engine never sees
this module; services load a collection, derive, and save explicitly.
"""

import json
import logging
import sqlite3
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Generic, TypeVar

from . import db
from .core.errors import StoreError
from .core.models import Achievement, Habit
from .lib.converters import (
    Record,
    achievement_to_record,
    habit_to_record,
    record_to_achievement,
    record_to_habit,
)

__all__ = [
    "ACHIEVEMENTS_KEY",
    "HABITS_KEY",
    "AchievementRepository",
    "BlobStore",
    "HabitRepository",
]

logger = logging.getLogger(__name__)

HABITS_KEY = "habits"
ACHIEVEMENTS_KEY = "achievements"

T = TypeVar("T")


class BlobStore:
    """Opaque string blobs keyed by name, backed by the sqlite `blobs` table."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path

    def get(self, key: str) -> str | None:
        try:
            with db.get_db(self.db_path) as conn:
                row = conn.execute("SELECT value FROM blobs WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"failed to read '{key}': {e}") from e
        return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        try:
            with db.get_db(self.db_path) as conn:
                conn.execute(
                    "INSERT INTO blobs (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
                    (key, value),
                )
        except sqlite3.Error as e:
            raise StoreError(f"failed to write '{key}': {e}") from e
        logger.debug("stored %s (%d bytes)", key, len(value))

    def delete(self, key: str) -> None:
        try:
            with db.get_db(self.db_path) as conn:
                conn.execute("DELETE FROM blobs WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise StoreError(f"failed to delete '{key}': {e}") from e


class _Repository(Generic[T]):
    key: str
    _decode: Callable[[Record], T]
    _encode: Callable[[T], Record]

    def __init__(self, store: BlobStore | None = None):
        self.store = store or BlobStore()

    def load(self) -> list[T]:
        """Load the collection. An unparseable blob yields an empty list; a bad record raises."""
        raw = self.store.get(self.key)
        if raw is None:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("could not decode %s, starting empty: %s", self.key, e)
            return []
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            logger.warning("%s blob is not a list of records, starting empty", self.key)
            return []
        return [self._decode(r) for r in records]

    def save(self, items: Iterable[T]) -> None:
        records = [self._encode(item) for item in items]
        self.store.put(self.key, json.dumps(records, ensure_ascii=False))


class HabitRepository(_Repository[Habit]):
    key = HABITS_KEY
    _decode = staticmethod(record_to_habit)
    _encode = staticmethod(habit_to_record)


class AchievementRepository(_Repository[Achievement]):
    key = ACHIEVEMENTS_KEY
    _decode = staticmethod(record_to_achievement)
    _encode = staticmethod(achievement_to_record)
