"""Record stores for TradeFlow.

Every collection is stored whole as JSON text under a name. Callers read a
collection as a list of records and write it back as a list; there are no
partial updates.
"""

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Collection names
JOURNAL_ENTRIES = "tradeflow-journal-entries"
LEGACY_TRADES = "tradeflow-trades"
CHECKLIST_LOGS = "tradeflow-checklist-logs"
PENDING_CHECKLIST = "tradeflow-pending-checklist"
CHECKLIST_STATE = "tradeflow-sop-checklist"
ACCOUNT_BALANCE = "tradeflow-account-balance"


class BaseStore(ABC):
    """Abstract key-value store holding JSON blobs by collection name.

    Implementations only provide raw text access; parsing and the
    degrade-to-default rules live here so every backend behaves the same.
    """

    COLLECTIONS = [
        JOURNAL_ENTRIES,
        LEGACY_TRADES,
        CHECKLIST_LOGS,
    ]

    @abstractmethod
    def _read(self, name: str) -> Optional[str]:
        """Return the raw text stored under name, or None."""
        pass

    @abstractmethod
    def _write(self, name: str, text: str) -> None:
        """Overwrite the raw text stored under name."""
        pass

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove whatever is stored under name."""
        pass

    def _read_json(self, name: str) -> Any:
        text = self._read(name)
        if text is None:
            return None
        try:
            return json.loads(text)
        except ValueError:
            logger.warning("Discarding unparseable data in %s", name)
            return None

    def load(self, name: str) -> list[dict]:
        """Load a collection as an ordered list of records.

        Args:
            name: Collection name.

        Returns:
            The stored records, or an empty list if the collection is
            missing, unparseable, or not a list.
        """
        data = self._read_json(name)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Collection %s is not a list, ignoring it", name)
            return []
        return data

    def save(self, name: str, records: list[dict]) -> None:
        """Overwrite a collection with the given records.

        Args:
            name: Collection name.
            records: Records to store, in order.
        """
        self._write(name, json.dumps(records))

    def load_object(self, name: str) -> Optional[dict]:
        """Load a single JSON object, None if missing or malformed."""
        data = self._read_json(name)
        return data if isinstance(data, dict) else None

    def save_object(self, name: str, obj: dict) -> None:
        self._write(name, json.dumps(obj))

    def get_value(self, name: str) -> Optional[str]:
        """Get a scalar preference stored as plain text."""
        return self._read(name)

    def set_value(self, name: str, value: str) -> None:
        """Set a scalar preference stored as plain text."""
        self._write(name, value)

    def get_stats(self) -> dict:
        """Get record counts for the known collections.

        Returns:
            Dictionary mapping collection name to record count.
        """
        return {name: len(self.load(name)) for name in self.COLLECTIONS}


class MemoryStore(BaseStore):
    """In-process store, used for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, str] = {}
        for name, value in (initial or {}).items():
            self._data[name] = value if isinstance(value, str) else json.dumps(value)

    def _read(self, name: str) -> Optional[str]:
        return self._data.get(name)

    def _write(self, name: str, text: str) -> None:
        self._data[name] = text

    def delete(self, name: str) -> None:
        self._data.pop(name, None)


class DataStore(BaseStore):
    """SQLite-backed store for TradeFlow."""

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS collections (
                    name TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    def _read(self, name: str) -> Optional[str]:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT payload FROM collections WHERE name = ?", (name,))
            row = cursor.fetchone()
            return row["payload"] if row else None
        finally:
            conn.close()

    def _write(self, name: str, text: str) -> None:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO collections (name, payload, updated_at)
                VALUES (?, ?, ?)
                """,
                (name, text, datetime.now().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, name: str) -> None:
        """Delete a collection.

        Args:
            name: Collection to delete.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM collections WHERE name = ?", (name,))
            conn.commit()
        finally:
            conn.close()
