"""Tests for the persisted document codec."""

from datetime import datetime, timezone

from kidcal.document import from_document, parse_instant, to_document
from kidcal.models import (
    DEFAULT_CATALOG,
    AppState,
    Event,
    Kid,
    Participation,
    ParticipationStatus,
)


def test_to_document_shape() -> None:
    """Test the serialized keys and optional fields."""
    state = AppState(
        catalog={"Region": ("north",)},
        kids=(Kid("k1", "Ann", ("north",), 100),),
        events=(
            Event(
                "e1",
                "Camp",
                datetime(2026, 3, 2, 9),
                datetime(2026, 3, 2, 12),
                tags=("north",),
                participants=(Participation("k1", ParticipationStatus.CONFIRMED),),
                suggested_at=500,
                suggest_notes={"k1": "hi"},
            ),
            Event("e2", "Swim", datetime(2026, 3, 3, 9), datetime(2026, 3, 3, 10)),
        ),
        visible={"k1": False},
    )
    doc = to_document(state)
    assert set(doc) == {"tagCatalog", "kids", "events"}
    assert doc["tagCatalog"] == {"Region": ["north"]}
    assert doc["kids"] == [{"id": "k1", "name": "Ann", "tags": ["north"], "createdAt": 100}]
    assert doc["events"][0] == {
        "id": "e1",
        "title": "Camp",
        "start": "2026-03-02T09:00:00",
        "end": "2026-03-02T12:00:00",
        "tags": ["north"],
        "participants": [{"kidId": "k1", "status": 2}],
        "suggestedAt": 500,
        "suggestNotes": {"k1": "hi"},
    }
    assert "suggestedAt" not in doc["events"][1]
    assert "suggestNotes" not in doc["events"][1]


def test_from_document_parses_instants_and_options() -> None:
    """Test loading revives datetimes and optional fields."""
    state = from_document(
        {
            "tagCatalog": {"Region": ["north", "south"]},
            "kids": [{"id": "k1", "name": "Ann", "tags": ["north"], "createdAt": 100}],
            "events": [
                {
                    "id": "e1",
                    "title": "Camp",
                    "start": "2026-03-02T09:00:00",
                    "end": "2026-03-02T12:00:00",
                    "tags": ["north"],
                    "participants": [{"kidId": "k1", "status": 1}],
                    "suggestedAt": 500,
                    "suggestNotes": {"k1": "hi"},
                }
            ],
        }
    )
    event = state.event("e1")
    assert event.start == datetime(2026, 3, 2, 9)
    assert event.participants == (Participation("k1", ParticipationStatus.IN_PROGRESS),)
    assert event.suggested_at == 500
    assert event.suggest_notes == {"k1": "hi"}
    assert state.kid("k1").created_at == 100
    assert state.visible == {"k1": True}


def test_from_document_older_events_without_optional_fields() -> None:
    """Test missing baseline and notes load as absent and empty."""
    state = from_document(
        {"events": [{"id": "e1", "title": "Camp", "start": "2026-03-02T09:00", "end": "2026-03-02T10:00"}]}
    )
    event = state.event("e1")
    assert event.suggested_at is None
    assert event.suggest_notes == {}
    assert event.tags == ()
    assert event.participants == ()
    assert state.catalog == DEFAULT_CATALOG


def test_from_document_skips_malformed_entries() -> None:
    """Test malformed entries are dropped rather than failing the load."""
    state = from_document(
        {
            "tagCatalog": {"Region": ["north", 3, "", "north"]},
            "kids": [None, {"name": "no id"}, {"id": "k1", "tags": "oops", "createdAt": "soon"}],
            "events": [
                "junk",
                {"id": "bad", "start": "not a date", "end": "2026-03-02T10:00:00"},
                {"id": "nostart", "end": "2026-03-02T10:00:00"},
                {
                    "id": "e1",
                    "title": 7,
                    "start": "2026-03-02T09:00:00",
                    "end": "2026-03-02T10:00:00",
                    "participants": [{"kidId": "k1", "status": 9}, {"status": 1}, {"kidId": "k1", "status": 2}],
                    "suggestedAt": "yesterday",
                    "suggestNotes": {"k1": 5, "k2": "ok"},
                },
            ],
        }
    )
    assert state.catalog == {"Region": ("north",)}
    assert [k.id for k in state.kids] == ["k1"]
    assert state.kid("k1").tags == ()
    assert state.kid("k1").created_at == 0
    assert [e.id for e in state.events] == ["e1"]
    event = state.event("e1")
    assert event.title == ""
    assert event.participants == (Participation("k1", ParticipationStatus.PENDING),)
    assert event.suggested_at is None
    assert event.suggest_notes == {"k2": "ok"}


def test_from_document_non_dict() -> None:
    """Test a missing or malformed root gives the default state."""
    assert from_document(None) == AppState()
    assert from_document(["nope"]) == AppState()
    assert from_document({"kids": "nope", "events": 5}).kids == ()


def test_parse_instant_utc_suffix() -> None:
    """Test trailing Z strings become local naive datetimes."""
    parsed = parse_instant("2026-03-02T09:00:00.000Z")
    expected = datetime(2026, 3, 2, 9, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parsed == expected
    assert parsed.tzinfo is None


def test_parse_instant_invalid() -> None:
    """Test unparsable values become None."""
    assert parse_instant(None) is None
    assert parse_instant("") is None
    assert parse_instant(12) is None
    assert parse_instant("2026-99-99") is None


def test_document_survives_reload() -> None:
    """Test saving then loading keeps the persisted data."""
    state = AppState(
        catalog={"Region": ("north",)},
        kids=(Kid("k1", "Ann", ("north",), 100),),
        events=(
            Event(
                "e1",
                "Camp",
                datetime(2026, 3, 2, 18),
                datetime(2026, 3, 3, 9),
                tags=("north",),
                participants=(Participation("k1"),),
                suggested_at=500,
            ),
        ),
    )
    reloaded = from_document(to_document(state))
    assert reloaded.catalog == state.catalog
    assert reloaded.kids == state.kids
    assert reloaded.events == state.events
