"""Event commands for kidcal CLI."""

from datetime import date, datetime

from cyclopts import App

from kidcal import assignment, attention, events, matching, projection, roster
from kidcal.models import AppState, Event, ParticipationStatus, ValidationError

event_app = App(name="event", help="Manage events and assignments")

STATUS_LABELS = {
    ParticipationStatus.PENDING: "pending",
    ParticipationStatus.IN_PROGRESS: "in progress",
    ParticipationStatus.CONFIRMED: "confirmed",
}


def _format_event(event: Event, state: AppState) -> str:
    window = f"{event.start:%Y-%m-%d %H:%M} - {event.end:%Y-%m-%d %H:%M}"
    badge = attention.attention_count(event, state.kids)
    warning = f" (!{badge} new match(es))" if badge else ""
    tags_str = f" [{', '.join(event.tags)}]" if event.tags else ""
    return f"{event.id}: {event.title} {window}{tags_str}{warning}"


def _parse_when(value: str) -> datetime:
    day, _, time = value.strip().partition(" ")
    return events.combine_date_time(day, time)


def _parse_month(value: str) -> date:
    try:
        return datetime.strptime(value.strip(), "%Y-%m").date()
    except ValueError as e:
        raise ValidationError(f"Invalid month {value!r}, expected YYYY-MM") from e


@event_app.command
def add(
    title: str,
    start_date: str,
    start_time: str = "09:00",
    end_time: str = "10:00",
    end_date: str | None = None,
    tags: str = "",
) -> None:
    """Create an event and print the suggested kids for it."""
    from kidcal.cli import open_session, split_tags

    start = events.combine_date_time(start_date, start_time)
    end = events.combine_date_time(end_date or start_date, end_time)
    with open_session() as session:
        event = session.apply(events.create_event, title, start, end, split_tags(tags))
        candidates = matching.suggest_for_event(session.state, event.id)
    print(f"Created event {event.id}: {event.title}")
    for c in candidates:
        print(f"  suggest {c.kid.id}: {c.kid.name} (score {c.score})")


@event_app.command
def edit(
    event_id: str,
    title: str | None = None,
    start: str | None = None,
    end: str | None = None,
) -> None:
    """Change an event's title or time window (``YYYY-MM-DD HH:MM``)."""
    from kidcal.cli import open_session

    with open_session() as session:
        event = session.state.event(event_id)
        if event is None:
            print(f"No event {event_id}")
            return
        new_start = _parse_when(start) if start else event.start
        new_end = _parse_when(end) if end else event.end
        session.apply(events.update_event_info, event_id, title or event.title, new_start, new_end)
    print(f"Updated event {event_id}")


@event_app.command
def tags(event_id: str, tags: str = "") -> None:
    """Replace an event's tags."""
    from kidcal.cli import open_session, split_tags

    with open_session() as session:
        session.apply(events.set_event_tags, event_id, split_tags(tags))
    print(f"Updated tags of event {event_id}")


@event_app.command
def delete(*event_ids: str) -> None:
    """Delete one or more events."""
    from kidcal.cli import open_session

    with open_session() as session:
        for event_id in event_ids:
            session.apply(events.delete_event, event_id)
    print(f"Deleted {len(event_ids)} event(s)")


@event_app.command
def show(event_id: str) -> None:
    """Show an event, its participants and any new strong matches."""
    from kidcal.cli import open_session

    with open_session() as session:
        state = session.state
    event = state.event(event_id)
    if event is None:
        print(f"No event {event_id}")
        return

    print(_format_event(event, state))
    print("\nParticipants:")
    if not event.participants:
        print("  (nobody assigned)")
    for p in event.participants:
        kid = state.kid(p.kid_id)
        name = kid.name if kid else "(removed)"
        note = event.suggest_notes.get(p.kid_id)
        note_str = f" - {note}" if note else ""
        print(f"  {p.kid_id}: {name} [{STATUS_LABELS[p.status]}]{note_str}")

    matches = attention.new_matches(event, state.kids)
    if matches:
        print("\nNew kids matching this event:")
        for c in matches:
            print(f"  {c.kid.id}: {c.kid.name} (score {c.score})")


@event_app.command
def suggest(event_id: str, search: str = "") -> None:
    """List kids not yet assigned to an event, best match first."""
    from kidcal.cli import open_session

    with open_session() as session:
        state = session.state
    event = state.event(event_id)
    if event is None:
        print(f"No event {event_id}")
        return

    candidates = matching.suggest_for_event(state, event_id, search)
    new_ids = attention.new_candidate_ids(event, candidates)
    print(f"Found {len(candidates)} candidate(s):\n")
    for c in candidates:
        marker = " NEW" if c.kid.id in new_ids else ""
        print(f"{c.kid.id}: {c.kid.name} (score {c.score}){marker}")


@event_app.command
def confirm(event_id: str, *kid_ids: str, all_matches: bool = False) -> None:
    """Assign picked kids to an event, or every matching kid with --all-matches."""
    from kidcal.cli import open_session

    with open_session() as session:
        picked = list(kid_ids)
        if all_matches:
            picked += matching.select_all_matches(matching.suggest_for_event(session.state, event_id))
        session.apply(assignment.confirm_assignment, event_id, picked)
    print(f"Confirmed {len(picked)} kid(s) for event {event_id}")


@event_app.command
def cycle(event_id: str, kid_id: str) -> None:
    """Advance a participant's status."""
    from kidcal.cli import open_session

    with open_session() as session:
        session.apply(assignment.cycle_status, event_id, kid_id)
        event = session.state.event(event_id)
    p = event.participation(kid_id) if event else None
    if p is None:
        print(f"Kid {kid_id} is not in event {event_id}")
        return
    print(f"{kid_id} is now {STATUS_LABELS[p.status]}")


@event_app.command
def remove(event_id: str, *kid_ids: str) -> None:
    """Remove participants from an event."""
    from kidcal.cli import open_session

    with open_session() as session:
        for kid_id in kid_ids:
            session.apply(assignment.remove_participant, event_id, kid_id)
    print(f"Removed {len(kid_ids)} kid(s) from event {event_id}")


@event_app.command
def note(event_id: str, kid_id: str, text: str = "") -> None:
    """Attach a note about a kid to an event. An empty text clears it."""
    from kidcal.cli import open_session

    with open_session() as session:
        session.apply(assignment.set_suggest_note, event_id, kid_id, text)
    print(f"Updated note for {kid_id} on event {event_id}")


@event_app.command(name="attention")
def attention_cmd() -> None:
    """List events with new, unassigned kids that match them strongly."""
    from kidcal.cli import open_session

    with open_session() as session:
        state = session.state
    counts = {event_id: n for event_id, n in attention.attention_by_event(state).items() if n}
    if not counts:
        print("No events need attention")
        return
    for event_id, count in counts.items():
        print(f"{event_id}: {state.event(event_id).title} ({count} new match(es))")


@event_app.command(name="list")
def list_events(tags: str = "", search: str = "") -> None:
    """List events grouped by day, filtered by tags (all must match) and search text."""
    from kidcal.cli import open_session, split_tags

    with open_session() as session:
        state = session.state
    groups = projection.list_view(state, split_tags(tags), search)
    if not groups:
        print("No events found")
        return
    for day, day_events in groups:
        print(f"{day.isoformat()}")
        for event in day_events:
            print(f"  {_format_event(event, state)}")


@event_app.command
def calendar(month: str | None = None, visible: str = "", hidden: str = "") -> None:
    """Print a month grid of events (``--month YYYY-MM``).

    Events nobody is assigned to are always shown.

    Args:
        month: Month to show, defaults to the current one
        visible: Comma separated kid ids to show, hiding everyone else
        hidden: Comma separated kid ids to hide
    """
    from kidcal.cli import open_session, split_tags

    cursor = _parse_month(month) if month else date.today().replace(day=1)

    with open_session() as session:
        state = session.state
    # Visibility is display state, toggled on a local snapshot and never saved.
    state = roster.hide_all(state) if visible else roster.show_all(state)
    for kid_id in split_tags(visible) + split_tags(hidden):
        state = roster.toggle_visible(state, kid_id)
    buckets = projection.events_by_day(projection.visible_events(state))

    print(f"Calendar {cursor:%Y-%m}")
    for day in projection.month_grid(cursor):
        if day.month != cursor.month or day not in buckets:
            continue
        print(f"{day.isoformat()} ({day:%a})")
        for event in buckets[day]:
            time_label = f"{event.start:%H:%M}" if projection.is_start_day(event, day) else "<->"
            flag = " !" if attention.needs_attention(event, state.kids) else ""
            print(f"  {time_label} {event.title}{flag}")
