"""Store interface for persisting the application document."""

from abc import ABC, abstractmethod
from typing import Any


class StoreError(Exception):
    """Raised when a store cannot read or write the document."""


class Store(ABC):
    """Abstract base class for document stores.

    A store keeps a single record under a fixed key. Saving replaces the whole
    record; it never merges field by field.
    """

    @abstractmethod
    def load(self) -> dict[str, Any] | None:
        """Load the stored document, or ``None`` if nothing was saved yet."""
        pass

    @abstractmethod
    def save(self, document: dict[str, Any]) -> None:
        """Replace the stored document."""
        pass

    def close(self) -> None:
        """Release any resources held by the store."""
