"""Event editing: creating, rescheduling, retagging and deleting events."""

import uuid
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

import structlog

from kidcal.catalog import clean, require_known
from kidcal.models import AppState, Event, Tag, ValidationError

logger = structlog.get_logger()


def combine_date_time(date_str: str, time_str: str) -> datetime:
    """Build a datetime from ``YYYY-MM-DD`` and ``HH:MM`` strings.

    Raises:
        ValidationError: If either part cannot be parsed
    """
    try:
        return datetime.strptime(f"{date_str.strip()} {time_str.strip()}", "%Y-%m-%d %H:%M")
    except ValueError as e:
        raise ValidationError(f"Invalid date/time: {date_str!r} {time_str!r}") from e


def _validate(title: str, start: datetime, end: datetime) -> str:
    title = clean(title)
    if not title:
        raise ValidationError("Event title must not be empty")
    if start >= end:
        raise ValidationError("Event start must be before its end")
    return title


def create_event(
    state: AppState,
    title: str,
    start: datetime,
    end: datetime,
    tags: Iterable[Tag] = (),
    event_id: str | None = None,
) -> tuple[AppState, Event]:
    """Create an event with nobody assigned yet.

    Raises:
        ValidationError: If the title is blank, the window is empty or a tag is not in the catalog
    """
    title = _validate(title, start, end)
    tags = require_known(state.catalog, tags)
    event = Event(
        id=event_id or str(uuid.uuid4()),
        title=title,
        start=start,
        end=end,
        tags=tags,
    )
    logger.info("Event created", event_id=event.id, title=title, start=start.isoformat())
    return replace(state, events=state.events + (event,)), event


def _update_event(state: AppState, event_id: str, **changes) -> AppState:
    event = state.event(event_id)
    if event is None:
        logger.debug("Ignoring operation on unknown event", event_id=event_id)
        return state
    updated = replace(event, **changes)
    if updated == event:
        return state
    return replace(state, events=tuple(updated if e.id == event_id else e for e in state.events))


def update_event_info(state: AppState, event_id: str, title: str, start: datetime, end: datetime) -> AppState:
    """Change an event's title and time window.

    Raises:
        ValidationError: If the title is blank or the window is empty
    """
    title = _validate(title, start, end)
    return _update_event(state, event_id, title=title, start=start, end=end)


def set_event_tags(state: AppState, event_id: str, tags: Iterable[Tag]) -> AppState:
    return _update_event(state, event_id, tags=require_known(state.catalog, tags))


def delete_event(state: AppState, event_id: str) -> AppState:
    if state.event(event_id) is None:
        return state
    logger.info("Event deleted", event_id=event_id)
    return replace(state, events=tuple(e for e in state.events if e.id != event_id))
