"""Assignment state machine: confirming suggestions and per-kid status.

Every function takes the current ``AppState`` and returns the next one.
Unknown event or kid ids leave the state untouched.
"""

import time
from collections.abc import Callable, Iterable
from dataclasses import replace

import structlog

from kidcal.models import AppState, Event, Participation

logger = structlog.get_logger()


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def _update_event(state: AppState, event_id: str, update: Callable[[Event], Event]) -> AppState:
    event = state.event(event_id)
    if event is None:
        logger.debug("Ignoring operation on unknown event", event_id=event_id)
        return state
    updated = update(event)
    if updated is event:
        return state
    return replace(state, events=tuple(updated if e.id == event_id else e for e in state.events))


def confirm_assignment(
    state: AppState,
    event_id: str,
    picked_ids: Iterable[str],
    now: int | None = None,
) -> AppState:
    """Add picked kids to an event and record the suggestion baseline.

    Kids already in the event are skipped. ``suggested_at`` is only set the
    first time; later confirmations keep the original baseline.

    Args:
        state: Current application state
        event_id: Event receiving the kids
        picked_ids: Kid ids chosen from the suggestion list
        now: Epoch milliseconds to record as baseline (defaults to current time)
    """
    picked = list(dict.fromkeys(picked_ids))
    baseline = now_ms() if now is None else now

    def update(event: Event) -> Event:
        existing = event.assigned_ids()
        added = tuple(Participation(kid_id=kid_id) for kid_id in picked if kid_id not in existing)
        if not added and event.suggested_at is not None:
            return event
        logger.info(
            "Confirming assignment",
            event_id=event.id,
            added=[p.kid_id for p in added],
            first_triage=event.suggested_at is None,
        )
        return replace(
            event,
            participants=event.participants + added,
            suggested_at=event.suggested_at if event.suggested_at is not None else baseline,
        )

    return _update_event(state, event_id, update)


def cycle_status(state: AppState, event_id: str, kid_id: str) -> AppState:
    """Advance one kid's status: pending, in progress, confirmed, pending..."""

    def update(event: Event) -> Event:
        if event.participation(kid_id) is None:
            return event
        participants = tuple(
            replace(p, status=p.status.next()) if p.kid_id == kid_id else p for p in event.participants
        )
        return replace(event, participants=participants)

    return _update_event(state, event_id, update)


def remove_participant(state: AppState, event_id: str, kid_id: str) -> AppState:
    def update(event: Event) -> Event:
        if event.participation(kid_id) is None:
            return event
        logger.debug("Removing participant", event_id=event.id, kid_id=kid_id)
        return replace(event, participants=tuple(p for p in event.participants if p.kid_id != kid_id))

    return _update_event(state, event_id, update)


def set_suggest_note(state: AppState, event_id: str, kid_id: str, note: str) -> AppState:
    """Attach a free-text note about a kid to an event. A blank note clears it.

    The kid need not be assigned yet, notes are taken while reviewing
    suggestions. Ids missing from the roster are ignored.
    """
    note = note.strip()
    if state.kid(kid_id) is None:
        logger.debug("Ignoring note for unknown kid", kid_id=kid_id)
        return state

    def update(event: Event) -> Event:
        if event.suggest_notes.get(kid_id, "") == note:
            return event
        notes = dict(event.suggest_notes)
        if note:
            notes[kid_id] = note
        else:
            notes.pop(kid_id, None)
        return replace(event, suggest_notes=notes)

    return _update_event(state, event_id, update)


def drop_kid_everywhere(events: Iterable[Event], kid_id: str) -> tuple[Event, ...]:
    """Remove a kid's participation from every event."""
    return tuple(
        replace(e, participants=tuple(p for p in e.participants if p.kid_id != kid_id))
        if e.participation(kid_id) is not None
        else e
        for e in events
    )
