"""Kid suggestion scoring and ranking."""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from kidcal.models import AppState, Event, Kid, Tag

logger = structlog.get_logger()


@dataclass(frozen=True)
class Candidate:
    """A kid suggested for an event together with its match score."""

    kid: Kid
    score: int


def score(kid_tags: Iterable[Tag], event_tags: Iterable[Tag]) -> int:
    """Number of tags the two sides share. Not normalized by set size."""
    return len(set(kid_tags) & set(event_tags))


def matches_query(kid: Kid, query: str) -> bool:
    """Case-insensitive substring match against the kid's name or any tag."""
    q = query.strip().lower()
    if not q:
        return True
    return q in kid.name.lower() or any(q in t.lower() for t in kid.tags)


def sort_candidates(candidates: Iterable[Candidate]) -> list[Candidate]:
    """Highest score first, then by name, then by id."""
    return sorted(candidates, key=lambda c: (-c.score, c.kid.name, c.kid.id))


def rank_candidates(
    event: Event,
    roster: Iterable[Kid],
    excluded_ids: Iterable[str] = (),
    query: str = "",
) -> list[Candidate]:
    """Rank roster kids by how well they match an event.

    Args:
        event: Event to match against
        roster: Kids to consider
        excluded_ids: Kids to skip, usually the ones already assigned
        query: Optional name/tag search text

    Returns:
        Candidates with a non-zero score, best match first
    """
    excluded = set(excluded_ids)
    event_tags = set(event.tags)
    candidates = []
    for kid in roster:
        if kid.id in excluded or not matches_query(kid, query):
            continue
        kid_score = score(kid.tags, event_tags)
        if kid_score > 0:
            candidates.append(Candidate(kid=kid, score=kid_score))
    return sort_candidates(candidates)


def suggest_for_event(state: AppState, event_id: str, query: str = "") -> list[Candidate]:
    """Rank the roster for an event, leaving out kids already assigned to it."""
    event = state.event(event_id)
    if event is None:
        logger.debug("Suggest requested for unknown event", event_id=event_id)
        return []
    candidates = rank_candidates(event, state.kids, event.assigned_ids(), query)
    logger.debug("Ranked candidates", event_id=event_id, count=len(candidates))
    return candidates


def select_all_matches(candidates: Iterable[Candidate]) -> list[str]:
    """Ids of every candidate with a positive score."""
    return [c.kid.id for c in candidates if c.score > 0]
