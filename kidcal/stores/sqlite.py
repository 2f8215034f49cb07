"""SQLite store keeping the document in an ``app_state`` table."""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog

from kidcal.document import DOCUMENT_KEY
from kidcal.store import Store, StoreError

logger = structlog.get_logger()

SCHEMA = """
CREATE TABLE IF NOT EXISTS app_state (
    id TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

UPSERT = """
INSERT INTO app_state (id, data, updated_at) VALUES (?, ?, ?)
ON CONFLICT(id) DO UPDATE SET data = excluded.data, updated_at = excluded.updated_at
"""


class SqliteStore(Store):
    """Upserts the whole document as JSON under a fixed row id."""

    def __init__(self, path: str | Path, key: str = DOCUMENT_KEY) -> None:
        """Initialize SQLite store.

        Args:
            path: Database file (``":memory:"`` is accepted)
            key: Row id the document is stored under
        """
        self.path = str(path)
        self.key = key
        logger.debug("Initializing SQLite store", path=self.path)
        try:
            if self.path != ":memory:":
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(self.path, check_same_thread=False)
            self.conn.execute(SCHEMA)
            self.conn.commit()
        except (OSError, sqlite3.Error) as e:
            logger.error("Failed to open SQLite store", path=self.path, error=str(e))
            raise StoreError(f"Failed to open {self.path}: {e}") from e

    def close(self) -> None:
        self.conn.close()

    def load(self) -> dict[str, Any] | None:
        try:
            row = self.conn.execute("SELECT data FROM app_state WHERE id = ?", (self.key,)).fetchone()
        except sqlite3.Error as e:
            logger.error("Failed to load document", path=self.path, error=str(e))
            raise StoreError(f"Failed to load document from {self.path}: {e}") from e

        if row is None:
            logger.debug("No stored document", key=self.key)
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            logger.error("Stored document is not valid JSON", key=self.key, error=str(e))
            raise StoreError(f"Stored document {self.key!r} is not valid JSON") from e

    def save(self, document: dict[str, Any]) -> None:
        updated_at = datetime.now(timezone.utc).isoformat()
        try:
            with self.conn:
                self.conn.execute(UPSERT, (self.key, json.dumps(document, ensure_ascii=False), updated_at))
        except (sqlite3.Error, TypeError, ValueError) as e:
            logger.error("Failed to save document", path=self.path, error=str(e))
            raise StoreError(f"Failed to save document to {self.path}: {e}") from e
        logger.debug("Document saved", key=self.key)
