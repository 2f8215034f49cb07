"""Data models for the kids calendar."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

Tag = str
TagCatalog = dict[str, tuple[Tag, ...]]

SELECTION_BUFFERS = ("kid_filter", "new_kid", "edit_kid", "new_event", "edit_event", "list_filter")

DEFAULT_CATALOG: TagCatalog = {
    "มหาวิทยาลัย": ("วิศวะ", "บริหาร", "สถาปัตย์", "แพทย์"),
    "จังหวัด": ("กรุงเทพ", "เชียงใหม่", "ขอนแก่น"),
    "รูปแบบ": ("online", "onsite"),
    "งบประมาณ": ("เงินน้อย", "เงินมาก"),
}


class ValidationError(ValueError):
    """Raised when an operation is rejected because its input is invalid."""


class ParticipationStatus(IntEnum):
    """Per-kid status inside an event, cycled by the user."""

    PENDING = 0
    IN_PROGRESS = 1
    CONFIRMED = 2

    def next(self) -> "ParticipationStatus":
        """Return the following status, wrapping back to PENDING."""
        return ParticipationStatus((self.value + 1) % len(ParticipationStatus))


def unique_tags(tags) -> tuple[Tag, ...]:
    """Drop duplicates, keeping the first occurrence of each tag."""
    return tuple(dict.fromkeys(tags))


@dataclass(frozen=True)
class Participation:
    """Links one kid to one event."""

    kid_id: str
    status: ParticipationStatus = ParticipationStatus.PENDING


@dataclass(frozen=True)
class Kid:
    """A participant on the roster."""

    id: str
    name: str
    tags: tuple[Tag, ...] = ()
    created_at: int = 0


@dataclass(frozen=True)
class Event:
    """A time-bounded activity kids can be assigned to.

    ``suggested_at`` is the epoch-millisecond baseline recorded the first time
    suggestions were confirmed; ``None`` means the event was never triaged.
    """

    id: str
    title: str
    start: datetime
    end: datetime
    tags: tuple[Tag, ...] = ()
    participants: tuple[Participation, ...] = ()
    suggested_at: int | None = None
    suggest_notes: dict[str, str] = field(default_factory=dict)

    def assigned_ids(self) -> set[str]:
        """Ids of every kid currently in the participant list."""
        return {p.kid_id for p in self.participants}

    def participation(self, kid_id: str) -> Participation | None:
        for p in self.participants:
            if p.kid_id == kid_id:
                return p
        return None


@dataclass(frozen=True)
class AppState:
    """Snapshot of everything the core operates on.

    Operations never mutate a snapshot; they return a new one.
    ``visible`` and ``selections`` are display state and are not persisted.
    """

    catalog: TagCatalog = field(default_factory=lambda: dict(DEFAULT_CATALOG))
    kids: tuple[Kid, ...] = ()
    events: tuple[Event, ...] = ()
    visible: dict[str, bool] = field(default_factory=dict)
    selections: dict[str, tuple[Tag, ...]] = field(
        default_factory=lambda: {name: () for name in SELECTION_BUFFERS}
    )

    def kid(self, kid_id: str) -> Kid | None:
        return next((k for k in self.kids if k.id == kid_id), None)

    def event(self, event_id: str) -> Event | None:
        return next((e for e in self.events if e.id == event_id), None)

    def visible_ids(self) -> set[str]:
        """Ids of roster kids currently switched on."""
        return {k.id for k in self.kids if self.visible.get(k.id)}
