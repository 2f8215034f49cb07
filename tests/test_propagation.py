"""Tests for tag rename/delete propagation."""

from datetime import datetime

import pytest

from kidcal.models import AppState, Event, Kid
from kidcal.propagation import delete_tag, rename_tag


@pytest.fixture
def state() -> AppState:
    """State where every kind of collection holds tags."""
    return AppState(
        catalog={"Region": ("north", "south"), "Format": ("online", "onsite"), "Other": ("north",)},
        kids=(
            Kid("p1", "Ann", ("north",), 100),
            Kid("p2", "Ben", ("north", "south", "online"), 100),
            Kid("p3", "Cat", ("onsite",), 100),
        ),
        events=(
            Event(
                "e1",
                "Camp",
                datetime(2026, 3, 2, 9),
                datetime(2026, 3, 2, 12),
                tags=("north", "online"),
            ),
        ),
        selections={
            "kid_filter": ("north",),
            "new_kid": ("south", "north"),
            "edit_kid": (),
            "new_event": ("online",),
            "edit_event": ("north",),
            "list_filter": ("north",),
        },
    )


def _all_tag_collections(state: AppState) -> list[tuple[str, ...]]:
    return [
        *state.catalog.values(),
        *(k.tags for k in state.kids),
        *(e.tags for e in state.events),
        *state.selections.values(),
    ]


def test_rename_reaches_every_collection(state: AppState) -> None:
    """Test no collection still holds the old tag after rename."""
    result = rename_tag(state, "north", "east")
    assert all("north" not in tags for tags in _all_tag_collections(result))
    assert result.catalog["Region"] == ("east", "south")
    assert result.catalog["Other"] == ("east",)
    assert result.kid("p1").tags == ("east",)
    assert result.event("e1").tags == ("east", "online")
    assert result.selections["kid_filter"] == ("east",)
    assert result.selections["list_filter"] == ("east",)
    assert result.selections["edit_event"] == ("east",)


def test_rename_every_holder_gets_new_tag(state: AppState) -> None:
    """Test every prior holder of the tag now holds the new name."""
    before = _all_tag_collections(state)
    after = _all_tag_collections(rename_tag(state, "north", "east"))
    for old, new in zip(before, after):
        if "north" in old:
            assert "east" in new


def test_rename_into_existing_tag_merges(state: AppState) -> None:
    """Test renaming onto a tag already present collapses the two."""
    result = rename_tag(state, "north", "south")
    assert result.catalog["Region"] == ("south",)
    assert result.kid("p1").tags == ("south",)
    assert result.kid("p2").tags == ("south", "online")
    assert result.selections["new_kid"] == ("south",)


def test_rename_scenario_region() -> None:
    """Test the single-category rename merge scenario."""
    state = AppState(catalog={"Region": ("north", "south")}, kids=(Kid("p1", "P1", ("north",), 100),))
    result = rename_tag(state, "north", "south")
    assert result.catalog == {"Region": ("south",)}
    assert result.kid("p1").tags == ("south",)


@pytest.mark.parametrize(
    ("old", "new"),
    [("north", "north"), ("", "east"), ("north", "  "), ("  ", "")],
)
def test_rename_invalid_input_is_noop(state: AppState, old: str, new: str) -> None:
    """Test blank or identical names leave the state untouched."""
    assert rename_tag(state, old, new) is state


def test_rename_trims_input(state: AppState) -> None:
    """Test surrounding whitespace is ignored."""
    result = rename_tag(state, " north ", " east ")
    assert result.kid("p1").tags == ("east",)


def test_rename_does_not_mutate_original(state: AppState) -> None:
    """Test the input snapshot is unchanged."""
    rename_tag(state, "north", "east")
    assert state.kid("p1").tags == ("north",)
    assert state.catalog["Region"] == ("north", "south")


def test_delete_removes_everywhere(state: AppState) -> None:
    """Test no collection holds the deleted tag."""
    result = delete_tag(state, "north")
    assert all("north" not in tags for tags in _all_tag_collections(result))
    assert result.catalog["Other"] == ()


def test_delete_keeps_everything_else(state: AppState) -> None:
    """Test only the deleted tag disappears; kids and events survive."""
    result = delete_tag(state, "north")
    before = _all_tag_collections(state)
    after = _all_tag_collections(result)
    for old, new in zip(before, after):
        assert new == tuple(t for t in old if t != "north")
    assert len(result.kids) == 3
    assert len(result.events) == 1


def test_delete_blank_is_noop(state: AppState) -> None:
    """Test blank tags are ignored."""
    assert delete_tag(state, "  ") is state


def test_delete_unknown_tag_changes_nothing(state: AppState) -> None:
    """Test deleting an unused tag leaves all values equal."""
    result = delete_tag(state, "missing")
    assert _all_tag_collections(result) == _all_tag_collections(state)
