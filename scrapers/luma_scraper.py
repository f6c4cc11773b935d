"""Scrape the lu.ma city calendar.

lu.ma renders its city pages client side but ships schema.org JSON-LD for
the listed events. When no JSON-LD event is present the link heuristics used
for events12 are applied instead.
"""
from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Callable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ingest.schemas import EventRecord
from ingest.source_catalog import EventSource

from .events12_scraper import extract_link_events
from .fetcher import fetch_html
from .utils import clean_title, contains_free, current_month_label, month_label, parse_iso_date

logger = logging.getLogger(__name__)


def _is_event_type(value: Any) -> bool:
    types = value if isinstance(value, list) else [value]
    return any(isinstance(t, str) and t.endswith("Event") for t in types)


def _extract_event_objects(data: Any) -> List[dict[str, Any]]:
    """Return event dicts from a JSON-LD blob."""
    items: List[dict[str, Any]] = []

    if isinstance(data, list):
        for obj in data:
            items.extend(_extract_event_objects(obj))
    elif isinstance(data, dict):
        if _is_event_type(data.get("@type")):
            items.append(data)
        elif isinstance(data.get("@graph"), list):
            items.extend(_extract_event_objects(data["@graph"]))
        elif isinstance(data.get("itemListElement"), list):
            for element in data["itemListElement"]:
                if isinstance(element, dict):
                    items.extend(_extract_event_objects(element.get("item", element)))

    return items


def _label_for(start: Any, fallback: str) -> str:
    """Month label for a JSON-LD ``startDate``; listings stay month precise."""
    if isinstance(start, str) and len(start) >= 10:
        try:
            day = parse_iso_date(start[:10])
        except ValueError:
            return fallback
        return month_label(day.month, day.year)
    return fallback


def extract_jsonld_events(html: str, base_url: str, fallback_label: str) -> List[EventRecord]:
    """Read schema.org events from the ``application/ld+json`` blocks of ``html``."""
    soup = BeautifulSoup(html, "html.parser")
    events: List[EventRecord] = []
    for tag in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(tag.string or "")
        except json.JSONDecodeError:
            continue

        for item in _extract_event_objects(data):
            name = item.get("name")
            if not isinstance(name, str):
                continue
            title = clean_title(name)
            if not title:
                continue
            url = item.get("url") or item.get("@id")
            events.append(
                EventRecord(
                    title=title,
                    date=_label_for(item.get("startDate"), fallback_label),
                    is_free=contains_free(name),
                    url=urljoin(base_url, url) if isinstance(url, str) and url else None,
                )
            )
    return events


def scrape_luma(
    source: EventSource,
    month: Optional[int] = None,
    year: Optional[int] = None,
    today: Optional[date] = None,
    fetch: Callable[[str], str] = fetch_html,
) -> List[EventRecord]:
    """Fetch the lu.ma city page and extract its events.

    lu.ma has no month-scoped pages, so ``month``/``year`` only change the
    label given to link-derived records.
    """
    label = month_label(month, year) if month and year else current_month_label(today)
    html = fetch(source.url)

    events = extract_jsonld_events(html, source.url, label)
    if events:
        logger.info("lu.ma JSON-LD returned %d event(s)", len(events))
        return events

    events = extract_link_events(html, label)
    logger.info("lu.ma link heuristics returned %d event(s)", len(events))
    return events
