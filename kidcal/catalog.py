"""Tag catalog primitives.

The catalog maps a category name to its tags. Every function here returns a
new value and treats blank or duplicate input as a no-op, handing back the
value it was given.
"""

from collections.abc import Iterable
from dataclasses import replace

import structlog

from kidcal.models import AppState, Tag, TagCatalog, ValidationError, unique_tags

logger = structlog.get_logger()


def clean(value: str | None) -> str:
    """Trim a user-supplied name; ``None`` becomes the empty string."""
    return (value or "").strip()


def add_category(catalog: TagCatalog, name: str) -> TagCatalog:
    """Add an empty category unless the name is blank or already used."""
    name = clean(name)
    if not name or name in catalog:
        return catalog
    logger.debug("Adding tag category", category=name)
    return {**catalog, name: ()}


def add_tag(catalog: TagCatalog, category: str, tag: str) -> TagCatalog:
    """Append a tag to an existing category."""
    category = clean(category)
    tag = clean(tag)
    if not category or not tag or category not in catalog:
        return catalog
    if tag in catalog[category]:
        return catalog
    logger.debug("Adding tag", category=category, tag=tag)
    return {**catalog, category: catalog[category] + (tag,)}


def categories(catalog: TagCatalog) -> list[str]:
    return list(catalog)


def tags_in(catalog: TagCatalog, category: str) -> list[Tag]:
    return list(catalog.get(category, ()))


def all_tags(catalog: TagCatalog) -> list[Tag]:
    """Every distinct tag in the catalog, in first-seen order."""
    seen: dict[Tag, None] = {}
    for tags in catalog.values():
        for tag in tags:
            seen.setdefault(tag, None)
    return list(seen)


def require_known(catalog: TagCatalog, tags: Iterable[Tag]) -> tuple[Tag, ...]:
    """Deduplicate tags, rejecting any that no category holds.

    Raises:
        ValidationError: If a tag is missing from the catalog
    """
    tags = unique_tags(t for t in map(clean, tags) if t)
    known = set(all_tags(catalog))
    unknown = [t for t in tags if t not in known]
    if unknown:
        raise ValidationError(f"Unknown tag(s): {', '.join(unknown)}. Add them to a category first")
    return tags


def toggle_tag(selection: tuple[Tag, ...], tag: Tag) -> tuple[Tag, ...]:
    """Flip a tag in a selection buffer, as the tag picker does on click."""
    if tag in selection:
        return tuple(t for t in selection if t != tag)
    return selection + (tag,)


def add_category_to_state(state: AppState, name: str) -> AppState:
    new_catalog = add_category(state.catalog, name)
    return state if new_catalog is state.catalog else replace(state, catalog=new_catalog)


def add_tag_to_state(state: AppState, category: str, tag: str) -> AppState:
    new_catalog = add_tag(state.catalog, category, tag)
    return state if new_catalog is state.catalog else replace(state, catalog=new_catalog)
