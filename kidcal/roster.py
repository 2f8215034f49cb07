"""Roster editing: adding, renaming, retagging and deleting kids."""

import uuid
from collections.abc import Iterable
from dataclasses import replace

import structlog

from kidcal.assignment import drop_kid_everywhere, now_ms
from kidcal.catalog import clean, require_known
from kidcal.models import AppState, Kid, Tag, ValidationError

logger = structlog.get_logger()


def add_kid(
    state: AppState,
    name: str,
    tags: Iterable[Tag] = (),
    now: int | None = None,
    kid_id: str | None = None,
) -> tuple[AppState, Kid]:
    """Add a kid to the roster. New kids start visible.

    Raises:
        ValidationError: If the name is blank or a tag is not in the catalog
    """
    name = clean(name)
    if not name:
        raise ValidationError("Kid name must not be empty")
    tags = require_known(state.catalog, tags)

    kid = Kid(
        id=kid_id or str(uuid.uuid4()),
        name=name,
        tags=tags,
        created_at=now_ms() if now is None else now,
    )
    logger.info("Kid added", kid_id=kid.id, name=kid.name)
    return replace(state, kids=state.kids + (kid,), visible={**state.visible, kid.id: True}), kid


def _update_kid(state: AppState, kid_id: str, **changes) -> AppState:
    kid = state.kid(kid_id)
    if kid is None:
        logger.debug("Ignoring operation on unknown kid", kid_id=kid_id)
        return state
    updated = replace(kid, **changes)
    if updated == kid:
        return state
    return replace(state, kids=tuple(updated if k.id == kid_id else k for k in state.kids))


def rename_kid(state: AppState, kid_id: str, name: str) -> AppState:
    name = clean(name)
    if not name:
        raise ValidationError("Kid name must not be empty")
    return _update_kid(state, kid_id, name=name)


def set_kid_tags(state: AppState, kid_id: str, tags: Iterable[Tag]) -> AppState:
    return _update_kid(state, kid_id, tags=require_known(state.catalog, tags))


def delete_kid(state: AppState, kid_id: str) -> AppState:
    """Remove a kid from the roster and from every event it was assigned to."""
    if state.kid(kid_id) is None:
        return state
    logger.info("Kid deleted", kid_id=kid_id)
    visible = {k: v for k, v in state.visible.items() if k != kid_id}
    return replace(
        state,
        kids=tuple(k for k in state.kids if k.id != kid_id),
        events=drop_kid_everywhere(state.events, kid_id),
        visible=visible,
    )


def toggle_visible(state: AppState, kid_id: str) -> AppState:
    if state.kid(kid_id) is None:
        return state
    return replace(state, visible={**state.visible, kid_id: not state.visible.get(kid_id)})


def show_all(state: AppState) -> AppState:
    return replace(state, visible={k.id: True for k in state.kids})


def hide_all(state: AppState) -> AppState:
    return replace(state, visible={k.id: False for k in state.kids})
