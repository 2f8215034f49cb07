"""Debounced, best-effort persistence of state snapshots."""

import threading

import structlog

from kidcal.document import to_document
from kidcal.models import AppState
from kidcal.store import Store, StoreError

logger = structlog.get_logger()

DEFAULT_DELAY = 0.3


class AutoSaver:
    """Saves the latest scheduled snapshot after a quiet period.

    Scheduling again before the delay elapses replaces the pending snapshot
    and restarts the timer. Saves run one at a time, and a snapshot older
    than one already written is skipped, so a slow save can never overwrite
    a newer one. Save failures are logged and dropped; the in-memory state
    stays authoritative and the next save supersedes them.
    """

    def __init__(self, store: Store, delay: float = DEFAULT_DELAY) -> None:
        self.store = store
        self.delay = delay
        self._lock = threading.Lock()
        self._save_lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: AppState | None = None
        self._generation = 0
        self._saved_generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def schedule(self, state: AppState) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending = state
            self._timer = threading.Timer(self.delay, self.flush)
            self._timer.daemon = True
            self._timer.start()
        logger.debug("Save scheduled", delay=self.delay)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

    def flush(self) -> bool:
        """Save the pending snapshot now.

        Waits for a save already in progress before writing.

        Returns:
            True if a snapshot was saved, False if nothing was pending, a newer
            snapshot was already written or the save failed
        """
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            state, self._pending = self._pending, None
            generation = self._generation

        if state is None:
            return False
        with self._save_lock:
            if generation <= self._saved_generation:
                logger.debug("Skipping stale snapshot", generation=generation, saved=self._saved_generation)
                return False
            try:
                self.store.save(to_document(state))
            except StoreError as e:
                logger.error("Autosave failed", error=str(e))
                return False
            self._saved_generation = generation
        logger.debug("Autosave completed", kids=len(state.kids), events=len(state.events))
        return True
