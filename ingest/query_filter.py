"""Filter predicates behind the event search endpoint."""
from __future__ import annotations

from typing import Iterable, List, Optional

from .schemas import EventRecord

ALL_CATEGORY_VALUES = {"", "all", "all categories"}


def _search_text(event: EventRecord, include_location: bool = True) -> str:
    parts = [event.title, event.description or ""]
    if include_location:
        parts.append(event.location or "")
    return " ".join(parts).lower()


def matches_text(event: EventRecord, query: Optional[str]) -> bool:
    """True when any whitespace-separated term of ``query`` occurs in the event."""
    if not query or not query.strip():
        return True
    terms = query.lower().split()
    text = _search_text(event)
    return any(term in text for term in terms)


def matches_category(event: EventRecord, category: Optional[str]) -> bool:
    """Heuristic category match against title and description."""
    if category is None or category.strip().lower() in ALL_CATEGORY_VALUES:
        return True
    return category.lower() in _search_text(event, include_location=False)


def matches_city(event: EventRecord, city: Optional[str]) -> bool:
    """Match ``city`` against the location only; unlocated events never match."""
    if not city:
        return True
    return city.lower() in (event.location or "").lower()


def filter_events(
    events: Iterable[EventRecord],
    q: Optional[str] = None,
    category: Optional[str] = None,
    city: Optional[str] = None,
) -> List[EventRecord]:
    """Apply every given filter; an event must pass all of them."""
    return [
        e for e in events
        if matches_text(e, q) and matches_category(e, category) and matches_city(e, city)
    ]


def restrict_to_dates(events: Iterable[EventRecord], date_events: Iterable[EventRecord]) -> List[EventRecord]:
    """Keep events whose (title, source) also appears in ``date_events``.

    An empty ``date_events`` leaves ``events`` untouched.
    """
    events = list(events)
    keys = {(e.title, e.source) for e in date_events}
    if not keys:
        return events
    return [e for e in events if (e.title, e.source) in keys]
