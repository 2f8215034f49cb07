"""Conversion between ``AppState`` and the persisted document.

The document is the only storage contract::

    {tagCatalog: {category: [tag]},
     kids: [{id, name, tags, createdAt}],
     events: [{id, title, start, end, tags, participants: [{kidId, status}],
               suggestedAt?, suggestNotes?}]}

Loading is lenient: malformed entries are skipped or treated as absent.
"""

from datetime import datetime
from typing import Any

import structlog

from kidcal.models import (
    DEFAULT_CATALOG,
    AppState,
    Event,
    Kid,
    Participation,
    ParticipationStatus,
    TagCatalog,
    unique_tags,
)

logger = structlog.get_logger()

DOCUMENT_KEY = "default"


def to_document(state: AppState) -> dict[str, Any]:
    """Serialize the persisted part of the state. Visibility and selections are left out."""
    return {
        "tagCatalog": {category: list(tags) for category, tags in state.catalog.items()},
        "kids": [
            {"id": k.id, "name": k.name, "tags": list(k.tags), "createdAt": k.created_at} for k in state.kids
        ],
        "events": [_event_to_dict(e) for e in state.events],
    }


def _event_to_dict(event: Event) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": event.id,
        "title": event.title,
        "start": event.start.isoformat(),
        "end": event.end.isoformat(),
        "tags": list(event.tags),
        "participants": [{"kidId": p.kid_id, "status": int(p.status)} for p in event.participants],
    }
    if event.suggested_at is not None:
        data["suggestedAt"] = event.suggested_at
    if event.suggest_notes:
        data["suggestNotes"] = dict(event.suggest_notes)
    return data


def parse_instant(value: Any) -> datetime | None:
    """Parse an ISO-8601 string into a naive local datetime, or ``None``."""
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _tags(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return unique_tags(t for t in value if isinstance(t, str) and t)


def _timestamp(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def _catalog(value: Any) -> TagCatalog:
    if not isinstance(value, dict):
        return dict(DEFAULT_CATALOG)
    return {str(category): _tags(tags) for category, tags in value.items()}


def _kid(raw: Any) -> Kid | None:
    if not isinstance(raw, dict) or not raw.get("id"):
        return None
    name = raw.get("name")
    return Kid(
        id=str(raw["id"]),
        name=name if isinstance(name, str) else "",
        tags=_tags(raw.get("tags")),
        created_at=_timestamp(raw.get("createdAt")) or 0,
    )


def _participants(value: Any) -> tuple[Participation, ...]:
    if not isinstance(value, list):
        return ()
    out: dict[str, Participation] = {}
    for raw in value:
        if not isinstance(raw, dict) or not raw.get("kidId"):
            continue
        kid_id = str(raw["kidId"])
        try:
            status = ParticipationStatus(raw.get("status", 0))
        except (TypeError, ValueError):
            status = ParticipationStatus.PENDING
        out.setdefault(kid_id, Participation(kid_id=kid_id, status=status))
    return tuple(out.values())


def _notes(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): v for k, v in value.items() if isinstance(v, str)}


def _event(raw: Any) -> Event | None:
    if not isinstance(raw, dict) or not raw.get("id"):
        return None
    start = parse_instant(raw.get("start"))
    end = parse_instant(raw.get("end"))
    if start is None or end is None:
        logger.warning("Skipping event without a valid time window", event_id=raw.get("id"))
        return None
    title = raw.get("title")
    return Event(
        id=str(raw["id"]),
        title=title if isinstance(title, str) else "",
        start=start,
        end=end,
        tags=_tags(raw.get("tags")),
        participants=_participants(raw.get("participants")),
        suggested_at=_timestamp(raw.get("suggestedAt")),
        suggest_notes=_notes(raw.get("suggestNotes")),
    )


def from_document(document: Any) -> AppState:
    """Build a state from a loaded document.

    Every loaded kid starts visible.
    """
    if not isinstance(document, dict):
        if document is not None:
            logger.warning("Ignoring malformed document", type=type(document).__name__)
        return AppState()

    kids = [k for k in map(_kid, _list(document.get("kids"))) if k is not None]
    events = [e for e in map(_event, _list(document.get("events"))) if e is not None]
    logger.debug("Document parsed", kids=len(kids), events=len(events))
    return AppState(
        catalog=_catalog(document.get("tagCatalog")),
        kids=tuple(kids),
        events=tuple(events),
        visible={k.id: True for k in kids},
    )
