"""Enrich scraped events with Tavily search results.

Search results are matched back onto records by plain substring overlap in
either direction. There is no scoring, so a loose title such as "Seattle
Events" can pick up an unrelated snippet.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, List, Optional, Sequence
from urllib.parse import urlparse

from ingest.config import CITY, TAVILY_DATE_MAX_RESULTS, TAVILY_DISCOVER_MAX_RESULTS
from ingest.schemas import EnrichmentResult, EventRecord
from ingest.search_client import TavilySearchClient

from .utils import contains_free, extract_location, format_long_date, truncate_description

logger = logging.getLogger(__name__)

DATE_FALLBACK_COUNT = 10
ALL_CATEGORIES = "All Categories"

DEFAULT_CATEGORIES = [
    ALL_CATEGORIES,
    "Arts & Theater",
    "Music & Concerts",
    "Food & Drink",
    "Sports & Fitness",
    "Gaming & Esports",
    "Business & Networking",
    "Tech & Innovation",
    "Community & Culture",
    "Education & Workshops",
    "Science & Space",
    "Family & Kids",
    "Outdoor & Adventure",
    "Comedy & Open Mic",
    "Movies & Film",
]


def find_matching_result(event: EventRecord, results: Sequence[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """Return the first result whose title or snippet overlaps ``event.title``."""
    for result in results:
        title = result.get("title") or ""
        content = result.get("content") or ""
        if event.title in title or (title and title in event.title) or event.title in content:
            return result
    return None


def enrich_event(event: EventRecord, result: dict[str, Any], relevant_date: Optional[str] = None) -> EventRecord:
    """Return a copy of ``event`` merged with a matched search result."""
    content = result.get("content")
    return replace(
        event,
        description=truncate_description(content),
        location=extract_location(content),
        url=result.get("url") or event.url,
        is_free=event.is_free or contains_free(content),
        relevant_date=relevant_date,
    )


def merge_results(
    events: Iterable[EventRecord], results: Sequence[dict[str, Any]], relevant_date: Optional[str] = None
) -> List[EventRecord]:
    """Enrich every event that has a matching result; keep the rest as-is."""
    merged: List[EventRecord] = []
    for event in events:
        match = find_matching_result(event, results)
        merged.append(enrich_event(event, match, relevant_date) if match else event)
    return merged


def select_date_events(events: List[EventRecord], formatted_date: str) -> List[EventRecord]:
    """Keep records tied to ``formatted_date``, else the first few as a fallback."""
    needle = formatted_date.lower()
    dated = [
        e for e in events
        if e.relevant_date or (e.description and needle in e.description.lower())
    ]
    return dated if dated else events[:DATE_FALLBACK_COUNT]


def enrich_events_for_date(
    date_string: str,
    events: Sequence[EventRecord],
    client: TavilySearchClient,
    domains: Sequence[str] = (),
    city: str = CITY,
    max_results: int = TAVILY_DATE_MAX_RESULTS,
) -> EnrichmentResult:
    """Search for ``city`` events on ``date_string`` and merge the hits.

    Never raises: an unparseable date or a failing search yields an empty
    result carrying the error and the raw date string.
    """
    try:
        formatted = format_long_date(date_string)
        query = " ".join([f"{city} events on {formatted}", *domains])
        logger.info("Searching for %s events on %s", city, formatted)
        results = client.search(query, include_domains=domains, max_results=max_results)
        enhanced = merge_results(events, results, relevant_date=formatted)
        return EnrichmentResult(date=formatted, events=select_date_events(enhanced, formatted))
    except Exception as exc:
        logger.error("Error getting events for date %s: %s", date_string, exc)
        return EnrichmentResult(date=date_string, events=[], error=str(exc))


def _discover_query(
    query: Optional[str],
    city: Optional[str],
    category: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
) -> str:
    parts = [query or "events"]
    if category and category != ALL_CATEGORIES:
        parts.append(category)
    if city:
        parts.append(f"in {city}")
    if start_date and end_date:
        parts.append(f"from {start_date} to {end_date}")
    elif start_date:
        parts.append(f"from {start_date}")
    elif end_date:
        parts.append(f"until {end_date}")
    return " ".join(parts)


def result_to_event(result: dict[str, Any]) -> EventRecord:
    """Convert a raw search hit into an :class:`EventRecord`."""
    url = result.get("url") or None
    content = result.get("content")
    return EventRecord(
        title=result.get("title") or "No title available",
        date="",
        is_free=contains_free(result.get("title")) or contains_free(content),
        description=truncate_description(content) or "No description available.",
        location=extract_location(content),
        url=url,
        source=(urlparse(url).hostname or "") if url else "",
    )


def discover_events(
    client: TavilySearchClient,
    query: Optional[str] = None,
    city: Optional[str] = None,
    category: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    max_results: int = TAVILY_DISCOVER_MAX_RESULTS,
) -> EnrichmentResult:
    """Free-text event search, de-duplicated by URL.

    A later hit with the same URL replaces an earlier one but keeps its
    position.
    """
    search_query = _discover_query(query, city, category, start_date, end_date)
    try:
        results = client.search(search_query, max_results=max_results)
    except Exception as exc:
        logger.error("Error fetching events from Tavily: %s", exc)
        return EnrichmentResult(date="", events=[], error=str(exc))

    by_url: dict[Any, EventRecord] = {}
    for result in results:
        event = result_to_event(result)
        by_url[event.url if event.url else id(event)] = event
    return EnrichmentResult(date="", events=list(by_url.values()))
