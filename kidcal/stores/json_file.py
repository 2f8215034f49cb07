"""JSON file store."""

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog

from kidcal.document import DOCUMENT_KEY
from kidcal.store import Store, StoreError

logger = structlog.get_logger()


class JsonFileStore(Store):
    """Stores the document in a single JSON file.

    The file holds ``{"id": ..., "data": <document>, "updated_at": ...}``.
    Each write goes to its own temporary file which then replaces the
    original, so a failed write never leaves a half-written document behind.
    """

    def __init__(self, path: str | Path, key: str = DOCUMENT_KEY) -> None:
        """Initialize JSON file store.

        Args:
            path: File holding the document (created on first save)
            key: Record identifier written alongside the document
        """
        self.path = Path(path)
        self.key = key
        logger.debug("Initializing JSON file store", path=str(self.path))

    def load(self) -> dict[str, Any] | None:
        if not self.path.exists():
            logger.debug("Store file does not exist, nothing to load", path=str(self.path))
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                record = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load store file", path=str(self.path), error=str(e))
            raise StoreError(f"Failed to load {self.path}: {e}") from e

        if not isinstance(record, dict) or record.get("id") != self.key:
            logger.warning("Store file has no record for key", path=str(self.path), key=self.key)
            return None
        logger.debug("Store file loaded", path=str(self.path))
        return record.get("data")

    def save(self, document: dict[str, Any]) -> None:
        record = {
            "id": self.key,
            "data": document,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", delete=False, dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            ) as f:
                tmp_path = f.name
                json.dump(record, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error("Failed to save store file", path=str(self.path), error=str(e))
            raise StoreError(f"Failed to save {self.path}: {e}") from e
        logger.debug("Store file saved", path=str(self.path))
