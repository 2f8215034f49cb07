"""Roster commands for kidcal CLI."""

from cyclopts import App

from kidcal import projection, roster

kid_app = App(name="kid", help="Manage the roster of kids")


@kid_app.command
def add(name: str, tags: str = "") -> None:
    """Add a kid with optional comma separated tags."""
    from kidcal.cli import open_session, split_tags

    with open_session() as session:
        kid = session.apply(roster.add_kid, name, split_tags(tags))
    print(f"Added kid {kid.id}: {kid.name}")


@kid_app.command
def rename(kid_id: str, name: str) -> None:
    """Rename a kid."""
    from kidcal.cli import open_session

    with open_session() as session:
        session.apply(roster.rename_kid, kid_id, name)
    print(f"Renamed kid {kid_id}")


@kid_app.command
def tags(kid_id: str, tags: str = "") -> None:
    """Replace a kid's tags."""
    from kidcal.cli import open_session, split_tags

    with open_session() as session:
        session.apply(roster.set_kid_tags, kid_id, split_tags(tags))
    print(f"Updated tags of kid {kid_id}")


@kid_app.command
def delete(*kid_ids: str) -> None:
    """Delete kids and remove them from every event."""
    from kidcal.cli import open_session

    with open_session() as session:
        for kid_id in kid_ids:
            session.apply(roster.delete_kid, kid_id)
    print(f"Deleted {len(kid_ids)} kid(s)")


@kid_app.command(name="list")
def list_kids(tags: str = "", search: str = "") -> None:
    """List kids carrying every given tag and matching the search text."""
    from kidcal.cli import open_session, split_tags

    with open_session() as session:
        kids = projection.filter_kids(session.state.kids, split_tags(tags), search)

    print(f"Found {len(kids)} kid(s):\n")
    for kid in kids:
        tags_str = f" [{', '.join(kid.tags)}]" if kid.tags else ""
        print(f"{kid.id}: {kid.name}{tags_str}")
