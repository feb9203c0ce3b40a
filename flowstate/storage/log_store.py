"""
Session Log Store — category-keyed JSON store for session logs and settings.

Each category is read and written as one whole JSON value. Log categories
are append-only from the engine's point of view; only clear() and a
wholesale import ever remove entries.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from .errors import DataImportError

logger = logging.getLogger(__name__)

TIMER_SETTINGS = "timerSettings"
FOCUS_SESSIONS = "focusSessions"
ACTIVITY_SESSIONS = "activitySessions"
BREAK_HISTORY = "breakHistory"
USER_PROFILE = "userProfile"

# category → empty value returned when missing or unreadable
CATEGORIES: Dict[str, Any] = {
    TIMER_SETTINGS: {},
    FOCUS_SESSIONS: [],
    ACTIVITY_SESSIONS: [],
    BREAK_HISTORY: [],
    USER_PROFILE: {},
}

# keys accepted on import in place of the canonical category name
_IMPORT_ALIASES = {"profile": USER_PROFILE}


def _empty(category: str) -> Any:
    default = CATEGORIES.get(category)
    return type(default)() if default is not None else None


class LogStore:
    """
    Base store. Subclasses provide raw string storage; this class handles
    JSON encoding, read-error tolerance, append serialization, and
    export/import.
    """

    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Backend hooks
    # ------------------------------------------------------------------

    def _read(self, category: str) -> Optional[str]:
        raise NotImplementedError

    def _write(self, category: str, value_json: str) -> None:
        raise NotImplementedError

    def _write_many(self, values: Mapping[str, str]) -> None:
        raise NotImplementedError

    def _keys(self) -> List[str]:
        raise NotImplementedError

    def _clear(self) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Read / write
    # ------------------------------------------------------------------

    def get(self, category: str) -> Any:
        """Return the stored value, or the category's empty value if missing/corrupt."""
        raw = self._read(category)
        if raw is None:
            return _empty(category)
        try:
            value = json.loads(raw)
        except ValueError:
            logger.warning("Category %r holds unreadable JSON; treating as empty", category)
            return _empty(category)
        expected = CATEGORIES.get(category)
        if expected is not None and not isinstance(value, type(expected)):
            logger.warning(
                "Category %r holds %s, expected %s; treating as empty",
                category, type(value).__name__, type(expected).__name__,
            )
            return _empty(category)
        return value

    def get_raw(self, category: str) -> Optional[str]:
        return self._read(category)

    def put(self, category: str, value: Any) -> None:
        with self._lock_for(category):
            self._write(category, _encode(value))

    def append(self, category: str, record: Dict[str, Any]) -> int:
        """Append one record to a list category. Returns the new length."""
        with self._lock_for(category):
            records = self.get(category)
            if not isinstance(records, list):
                records = []
            records.append(record)
            self._write(category, _encode(records))
            return len(records)

    def categories(self) -> List[str]:
        return sorted(self._keys())

    def clear(self) -> None:
        self._clear()
        logger.info("Session log store cleared")

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_data(self) -> Dict[str, Any]:
        return {category: self.get(category) for category in CATEGORIES}

    def export_json(self) -> str:
        return json.dumps(self.export_data(), indent=2)

    def import_data(self, payload: Union[str, bytes, Mapping[str, Any]]) -> List[str]:
        """
        Replace every category present in *payload* wholesale.

        All categories are written together or not at all. Raises
        DataImportError if the payload is not a JSON object.
        """
        if isinstance(payload, (str, bytes)):
            try:
                data = json.loads(payload)
            except ValueError as e:
                raise DataImportError(f"Import payload is not valid JSON: {e}") from e
        else:
            data = payload
        if not isinstance(data, Mapping):
            raise DataImportError("Import payload must be a JSON object")

        values: Dict[str, str] = {}
        for key, value in data.items():
            category = _IMPORT_ALIASES.get(key, key)
            if category not in CATEGORIES or value is None:
                continue
            values[category] = _encode(value)

        self._write_many(values)
        imported = sorted(values)
        logger.info("Imported categories: %s", ", ".join(imported) or "(none)")
        return imported

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _lock_for(self, category: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(category)
            if lock is None:
                lock = self._locks[category] = threading.Lock()
            return lock


class InMemoryLogStore(LogStore):
    """Process-local store; contents vanish with the process."""

    def __init__(self):
        super().__init__()
        self._data: Dict[str, str] = {}

    def _read(self, category: str) -> Optional[str]:
        return self._data.get(category)

    def _write(self, category: str, value_json: str) -> None:
        self._data[category] = value_json

    def _write_many(self, values: Mapping[str, str]) -> None:
        merged = dict(self._data)
        merged.update(values)
        self._data = merged

    def _keys(self) -> List[str]:
        return list(self._data)

    def _clear(self) -> None:
        self._data = {}


class SQLiteLogStore(LogStore):
    """SQLite-backed store; one row per category."""

    def __init__(self, db_path: Path):
        super().__init__()
        self.db_path = db_path
        self._init_db()

    def _read(self, category: str) -> Optional[str]:
        with self._conn() as conn:
            row = conn.execute(
                "SELECT value_json FROM kv WHERE category = ?", (category,)
            ).fetchone()
        return row[0] if row else None

    def _write(self, category: str, value_json: str) -> None:
        with self._conn() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv (category, value_json) VALUES (?, ?)",
                (category, value_json),
            )

    def _write_many(self, values: Mapping[str, str]) -> None:
        # single transaction: _conn() commits only if every insert succeeds
        with self._conn() as conn:
            conn.executemany(
                "INSERT OR REPLACE INTO kv (category, value_json) VALUES (?, ?)",
                list(values.items()),
            )

    def _keys(self) -> List[str]:
        with self._conn() as conn:
            return [row[0] for row in conn.execute("SELECT category FROM kv").fetchall()]

    def _clear(self) -> None:
        with self._conn() as conn:
            conn.execute("DELETE FROM kv")

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    category   TEXT PRIMARY KEY,
                    value_json TEXT NOT NULL
                )
                """
            )

    @contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()


def _encode(value: Any) -> str:
    return json.dumps(value)
