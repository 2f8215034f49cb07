"""Flags kids added after an event was triaged who match it well."""

from collections.abc import Iterable

from kidcal.matching import Candidate, score, sort_candidates
from kidcal.models import AppState, Event, Kid

# A single shared tag is not enough to warn about.
ATTENTION_THRESHOLD = 1


def _is_new(kid: Kid, baseline: int) -> bool:
    return kid.created_at > baseline


def new_matches(event: Event, kids: Iterable[Kid]) -> list[Candidate]:
    """Unassigned kids created after the event's baseline that score above the threshold.

    Events that were never triaged, or that have no tags, yield nothing.
    """
    baseline = event.suggested_at
    if baseline is None or not event.tags:
        return []
    event_tags = set(event.tags)
    assigned = event.assigned_ids()
    hits = []
    for kid in kids:
        if kid.id in assigned or not _is_new(kid, baseline):
            continue
        kid_score = score(kid.tags, event_tags)
        if kid_score > ATTENTION_THRESHOLD:
            hits.append(Candidate(kid=kid, score=kid_score))
    return sort_candidates(hits)


def attention_count(event: Event, kids: Iterable[Kid]) -> int:
    return len(new_matches(event, kids))


def attention_by_event(state: AppState) -> dict[str, int]:
    """Badge count for every event, zero for the ones never triaged."""
    return {e.id: attention_count(e, state.kids) for e in state.events}


def needs_attention(event: Event, kids: Iterable[Kid]) -> bool:
    """Whether the calendar should highlight the event.

    Unassigned events are highlighted so they are not forgotten.
    """
    return not event.participants or attention_count(event, kids) > 0


def new_candidate_ids(event: Event, candidates: Iterable[Candidate]) -> set[str]:
    """Ids in a suggestion list that are new since the baseline and score above the threshold."""
    baseline = event.suggested_at
    if baseline is None:
        return set()
    return {c.kid.id for c in candidates if _is_new(c.kid, baseline) and c.score > ATTENTION_THRESHOLD}
