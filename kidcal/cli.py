"""CLI for kidcal."""

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated, Literal

import structlog
from cyclopts import App, Parameter

from kidcal.autosave import AutoSaver
from kidcal.config import Config, get_config
from kidcal.config_commands import config_app
from kidcal.event_commands import event_app
from kidcal.kid_commands import kid_app
from kidcal.models import ValidationError
from kidcal.session import Session
from kidcal.store import Store, StoreError
from kidcal.stores import JsonFileStore, SqliteStore
from kidcal.tag_commands import tag_app

logger = structlog.get_logger()

app = App(
    name="kidcal",
    help="kidcal - plan which kids go to which events",
)

app.command(tag_app)
app.command(kid_app)
app.command(event_app)
app.command(config_app)


def configure_logging(log_level: str) -> None:
    """Configure structlog with the specified log level."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(min_level=log_level.lower()))


def get_store(config: Config | None = None) -> Store:
    """Get the configured store."""
    config = config or get_config()
    store_type = config.get("store")
    path = config.store_path()

    if store_type == "json":
        return JsonFileStore(path)
    elif store_type == "sqlite":
        return SqliteStore(path)
    else:
        raise ValueError(f"Unknown store: {store_type}. Set it using:\n  kidcal config set store json|sqlite")


@contextmanager
def open_session() -> Iterator[Session]:
    """Load a session from the configured store and flush it on exit.

    Raises:
        StoreError: If the stored document cannot be read, before any command runs
    """
    config = get_config()
    store = get_store(config)
    session = Session(store, AutoSaver(store, delay=config.autosave_delay()))
    session.load()
    if session.load_error is not None:
        store.close()
        raise session.load_error
    try:
        yield session
    finally:
        session.close()
        store.close()


def split_tags(value: str | None) -> list[str]:
    """Parse a comma separated tag list."""
    if not value:
        return []
    return [t.strip() for t in value.split(",") if t.strip()]


@app.meta.default
def main(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "critical",
) -> None:
    """Main entry point with global options."""
    configure_logging(log_level)
    try:
        app(tokens)
    except (ValidationError, StoreError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def run() -> None:
    app.meta()


if __name__ == "__main__":
    run()
