"""Text heuristics shared by the event scrapers and the enricher.

Everything here is pure so the rules can be tested and swapped without
touching network code.
"""
from __future__ import annotations

import re
from datetime import date, datetime

MIN_LINK_TEXT_LENGTH = 5
EVENT_LINK_TEXT_LENGTH = 10
DESCRIPTION_LIMIT = 200

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

_FREE_SUFFIX = re.compile(r"\s+FREE\s*$", re.IGNORECASE)
_LOCATION = re.compile(r"at\s+([^,.]+)", re.IGNORECASE)


def contains_free(text: str | None) -> bool:
    """Return True when ``text`` mentions "free" in any case."""
    return bool(text) and "free" in text.lower()


def clean_title(text: str) -> str:
    """Strip whitespace and a trailing ``FREE`` marker from link text."""
    return _FREE_SUFFIX.sub("", text.strip()).strip()


def is_event_link_text(text: str) -> bool:
    """Decide whether anchor text looks like an event listing.

    Short navigation links are skipped; anything with a ``+`` (events12 uses
    it for multi-part listings) or longer than ten characters is kept.
    """
    if not text or len(text) < MIN_LINK_TEXT_LENGTH:
        return False
    return "+" in text or len(text) > EVENT_LINK_TEXT_LENGTH


def extract_location(text: str | None) -> str | None:
    """Return the first ``at <phrase>`` capture from a snippet."""
    if not text:
        return None
    match = _LOCATION.search(text)
    return match.group(1).strip() if match else None


def truncate_description(text: str | None, limit: int = DESCRIPTION_LIMIT) -> str | None:
    if not text:
        return None
    return text[:limit] + "..."


def month_label(month: int, year: int) -> str:
    """``(10, 2026)`` -> ``"October 2026"``."""
    return f"{MONTH_NAMES[month - 1]} {year}"


def current_month_label(today: date | None = None) -> str:
    today = today or date.today()
    return month_label(today.month, today.year)


def parse_iso_date(value: str) -> date:
    """Parse ``YYYY-MM-DD``; raises ``ValueError`` for impossible dates."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def format_long_date(value: str) -> str:
    """``"2025-10-17"`` -> ``"Friday, October 17, 2025"``."""
    day = parse_iso_date(value)
    return f"{day:%A}, {MONTH_NAMES[day.month - 1]} {day.day}, {day.year}"
