"""Visibility filtering and day-grouped projections of events."""

from collections.abc import Iterable
from datetime import date, timedelta

from kidcal.matching import matches_query
from kidcal.models import AppState, Event, Kid, Tag


def event_visible(event: Event, visible_ids: set[str]) -> bool:
    """Events with nobody assigned are always shown so they are not lost."""
    if not event.participants:
        return True
    return any(p.kid_id in visible_ids for p in event.participants)


def visible_events(state: AppState) -> list[Event]:
    visible_ids = state.visible_ids()
    return [e for e in state.events if event_visible(e, visible_ids)]


def days_spanned(event: Event) -> list[date]:
    """Every calendar day from the start date to the end date inclusive."""
    first = event.start.date()
    last = event.end.date()
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def is_start_day(event: Event, day: date) -> bool:
    return event.start.date() == day


def events_by_day(events: Iterable[Event]) -> dict[date, list[Event]]:
    """Bucket events under each day they touch, each bucket sorted by start."""
    buckets: dict[date, list[Event]] = {}
    for event in events:
        for day in days_spanned(event):
            buckets.setdefault(day, []).append(event)
    for bucket in buckets.values():
        bucket.sort(key=lambda e: e.start)
    return buckets


def _norm(value: str | None) -> str:
    return (value or "").strip().lower()


def filter_events(
    events: Iterable[Event],
    kids: Iterable[Kid],
    tags: Iterable[Tag] = (),
    query: str = "",
) -> list[Event]:
    """Keep events carrying all of ``tags`` and matching ``query``.

    The query is searched in the title, tags, participant names and notes.
    """
    required = set(tags)
    q = _norm(query)
    names = {k.id: k.name for k in kids}
    out = []
    for event in events:
        if not required <= set(event.tags):
            continue
        if q:
            haystack = [
                event.title,
                *event.tags,
                *(names.get(p.kid_id, "") for p in event.participants),
                *event.suggest_notes.values(),
            ]
            if q not in " | ".join(_norm(s) for s in haystack):
                continue
        out.append(event)
    return out


def list_view(state: AppState, tags: Iterable[Tag] = (), query: str = "") -> list[tuple[date, list[Event]]]:
    """Filtered events grouped by day, days ascending and events by start."""
    matched = filter_events(state.events, state.kids, tags, query)
    return sorted(events_by_day(matched).items())


def filter_kids(kids: Iterable[Kid], tags: Iterable[Tag] = (), query: str = "") -> list[Kid]:
    """Roster panel filter: must carry every tag in ``tags`` and match the search."""
    required = set(tags)
    return [k for k in kids if required <= set(k.tags) and matches_query(k, query)]


def month_grid(cursor: date) -> list[date]:
    """The 42 days (six weeks, Monday first) displayed for the cursor's month."""
    first = cursor.replace(day=1)
    start = first - timedelta(days=first.weekday())
    return [start + timedelta(days=i) for i in range(42)]
