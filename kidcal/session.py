"""Session owning the current application state."""

from collections.abc import Callable
from typing import Any

import structlog

from kidcal.autosave import AutoSaver
from kidcal.document import from_document
from kidcal.models import AppState
from kidcal.store import Store, StoreError

logger = structlog.get_logger()


class Session:
    """Single writer for an ``AppState``.

    Operations are pure functions ``operation(state, *args) -> state`` or
    ``-> (state, result)``. The session feeds them the current snapshot,
    adopts whatever comes back and schedules a save when it changed.
    """

    def __init__(self, store: Store, saver: AutoSaver | None = None) -> None:
        self.store = store
        self.saver = saver or AutoSaver(store)
        self.state = AppState()
        self.load_error: StoreError | None = None

    def load(self) -> AppState:
        """Hydrate from the store.

        A failed load keeps the default state and records the error in
        ``load_error``; saving stays off for the rest of the session so the
        unreadable document is not overwritten.
        """
        self.load_error = None
        try:
            document = self.store.load()
        except StoreError as e:
            logger.error("Failed to load state, starting empty with saving disabled", error=str(e))
            self.load_error = e
            document = None
        if document is not None:
            self.state = from_document(document)
        logger.info("Session loaded", kids=len(self.state.kids), events=len(self.state.events))
        return self.state

    def apply(self, operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run an operation against the current state and adopt the result.

        Returns:
            The operation's extra result for ``(state, result)`` operations, else the new state
        """
        outcome = operation(self.state, *args, **kwargs)
        if isinstance(outcome, tuple):
            new_state, result = outcome
        else:
            new_state, result = outcome, outcome

        if new_state is not self.state:
            self.state = new_state
            if self.load_error is None:
                self.saver.schedule(new_state)
            else:
                logger.warning("Not saving, the stored document could not be read")
        return result

    def close(self) -> None:
        self.saver.flush()
