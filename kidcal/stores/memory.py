"""In-memory store for tests and throwaway sessions."""

import copy
from typing import Any

from kidcal.store import Store


class MemoryStore(Store):
    """Keeps a deep copy of the last saved document."""

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self.document = copy.deepcopy(document)
        self.saves = 0

    def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self.document)

    def save(self, document: dict[str, Any]) -> None:
        self.document = copy.deepcopy(document)
        self.saves += 1
