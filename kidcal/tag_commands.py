"""Tag catalog commands for kidcal CLI."""

from cyclopts import App

from kidcal import catalog, propagation

tag_app = App(name="tag", help="Manage the tag catalog")


@tag_app.command(name="list")
def list_tags() -> None:
    """List categories and their tags."""
    from kidcal.cli import open_session

    with open_session() as session:
        for category in catalog.categories(session.state.catalog):
            tags = catalog.tags_in(session.state.catalog, category)
            print(f"{category}: {', '.join(tags) if tags else '-'}")


@tag_app.command(name="add-category")
def add_category(name: str) -> None:
    """Add a tag category."""
    from kidcal.cli import open_session

    with open_session() as session:
        session.apply(catalog.add_category_to_state, name)
    print(f"Category {name.strip()} ready")


@tag_app.command
def add(category: str, tag: str) -> None:
    """Add a tag to an existing category."""
    from kidcal.cli import open_session

    with open_session() as session:
        if category.strip() not in session.state.catalog:
            print(f"No category named {category}")
            return
        session.apply(catalog.add_tag_to_state, category, tag)
    print(f"Tag {tag.strip()} in {category.strip()}")


@tag_app.command
def rename(old: str, new: str) -> None:
    """Rename a tag everywhere it is used."""
    from kidcal.cli import open_session

    with open_session() as session:
        session.apply(propagation.rename_tag, old, new)
    print(f"Renamed tag {old} -> {new}")


@tag_app.command
def delete(tag: str) -> None:
    """Delete a tag from the catalog, every kid and every event."""
    from kidcal.cli import open_session

    with open_session() as session:
        session.apply(propagation.delete_tag, tag)
    print(f"Deleted tag {tag}")
