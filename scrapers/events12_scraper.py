"""Scrape the events12.com monthly listing pages."""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional

from bs4 import BeautifulSoup

from ingest.schemas import EventRecord
from ingest.source_catalog import EventSource

from .fetcher import fetch_html
from .utils import (
    MONTH_NAMES,
    clean_title,
    contains_free,
    current_month_label,
    is_event_link_text,
    month_label,
)

logger = logging.getLogger(__name__)


def extract_link_events(html: str, label: str) -> List[EventRecord]:
    """Turn every event-looking anchor in ``html`` into an :class:`EventRecord`.

    Listing pages only carry month precision, so every record gets ``label``
    as its date.
    """
    soup = BeautifulSoup(html, "html.parser")
    events: List[EventRecord] = []
    for a_tag in soup.find_all("a"):
        text = a_tag.get_text().strip()
        if not is_event_link_text(text):
            continue
        title = clean_title(text)
        if not title:
            continue
        events.append(
            EventRecord(
                title=title,
                date=label,
                is_free=contains_free(text),
                url=a_tag.get("href") or None,
            )
        )
    return events


def month_url(base_url: str, month: int, year: int) -> str:
    """Return the month-scoped listing URL, e.g. ``.../seattle/october-2026/``."""
    if not base_url.endswith("/"):
        base_url += "/"
    return f"{base_url}{MONTH_NAMES[month - 1].lower()}-{year}/"


def scrape_events12(
    source: EventSource,
    month: Optional[int] = None,
    year: Optional[int] = None,
    today: Optional[date] = None,
    fetch: Callable[[str], str] = fetch_html,
) -> List[EventRecord]:
    """Fetch an events12 listing and extract its events.

    With ``month`` and ``year`` the month page is read and labelled with that
    month; otherwise the front page is labelled with the current month.
    """
    if month and year:
        url = month_url(source.url, month, year)
        label = month_label(month, year)
    else:
        url = source.url
        label = current_month_label(today)

    html = fetch(url)
    events = extract_link_events(html, label)
    logger.info("events12 returned %d event(s) from %s", len(events), url)
    return events
