"""Tag rename/delete propagation.

Tags are referenced by value, so renaming one is a bulk find-and-replace and
deleting one is a bulk removal. Both go through ``_propagate`` which is the
single place that knows every collection able to hold tag strings: the
catalog, each kid, each event and each selection buffer.
"""

from collections.abc import Callable
from dataclasses import replace

import structlog

from kidcal.catalog import clean
from kidcal.models import AppState, Tag, unique_tags

logger = structlog.get_logger()

TagTransform = Callable[[tuple[Tag, ...]], tuple[Tag, ...]]


def _propagate(state: AppState, transform: TagTransform) -> AppState:
    catalog = {category: transform(tags) for category, tags in state.catalog.items()}
    kids = tuple(replace(k, tags=transform(k.tags)) for k in state.kids)
    events = tuple(replace(e, tags=transform(e.tags)) for e in state.events)
    selections = {name: transform(tags) for name, tags in state.selections.items()}
    return replace(state, catalog=catalog, kids=kids, events=events, selections=selections)


def _holders(state: AppState, tag: Tag) -> dict[str, int]:
    return {
        "categories": sum(1 for tags in state.catalog.values() if tag in tags),
        "kids": sum(1 for k in state.kids if tag in k.tags),
        "events": sum(1 for e in state.events if tag in e.tags),
    }


def rename_tag(state: AppState, old: str, new: str) -> AppState:
    """Rename a tag everywhere it is referenced.

    If the new name already sits next to the old one in a collection the two
    collapse into a single entry.

    Args:
        state: Current application state
        old: Tag to rename
        new: Replacement tag

    Returns:
        New state, or ``state`` itself when the input is blank or unchanged
    """
    old = clean(old)
    new = clean(new)
    if not old or not new or old == new:
        return state

    logger.debug("Renaming tag", old=old, new=new, **_holders(state, old))

    def transform(tags: tuple[Tag, ...]) -> tuple[Tag, ...]:
        return unique_tags(new if t == old else t for t in tags)

    return _propagate(state, transform)


def delete_tag(state: AppState, tag: str) -> AppState:
    """Remove a tag from the catalog and from every kid, event and selection.

    Kids and events that carried the tag are kept; only the reference goes.
    """
    tag = clean(tag)
    if not tag:
        return state

    logger.debug("Deleting tag", tag=tag, **_holders(state, tag))

    def transform(tags: tuple[Tag, ...]) -> tuple[Tag, ...]:
        return tuple(t for t in tags if t != tag)

    return _propagate(state, transform)
