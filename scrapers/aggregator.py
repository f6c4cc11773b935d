"""Collect events from every configured source in parallel."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence

from ingest.schemas import AggregateResult, EventRecord, SourceResult
from ingest.source_catalog import EventSource

from .events12_scraper import scrape_events12
from .luma_scraper import scrape_luma

logger = logging.getLogger(__name__)

Scraper = Callable[..., List[EventRecord]]
Enrich = Callable[[EventSource, List[EventRecord]], List[EventRecord]]

SCRAPERS: Dict[str, Scraper] = {
    "listing": scrape_events12,
    "aggregator": scrape_luma,
}


def collect_source(
    source: EventSource,
    month: Optional[int] = None,
    year: Optional[int] = None,
    today: Optional[date] = None,
    enrich: Optional[Enrich] = None,
) -> SourceResult:
    """Scrape (and optionally enrich) one source, tagging records with its id.

    Any failure is logged and reported on the result instead of raised, so
    one broken source never hides the others.
    """
    try:
        scraper = SCRAPERS[source.type]
        events = scraper(source, month=month, year=year, today=today)
        if enrich is not None:
            events = enrich(source, events)
    except Exception as exc:
        logger.error("Error fetching events from %s: %s", source.id, exc)
        return SourceResult(source=source.id, error=str(exc))

    return SourceResult(
        source=source.id,
        events=[replace(event, source=source.id) for event in events],
    )


def aggregate_sources(
    sources: Sequence[EventSource],
    max_workers: int = 4,
    **kwargs,
) -> AggregateResult:
    """Run :func:`collect_source` for all ``sources`` concurrently.

    Results are concatenated in the order the sources are registered.
    """
    if not sources:
        return AggregateResult()
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(executor.map(lambda s: collect_source(s, **kwargs), sources))
    for result in results:
        logger.info("%s: %d event(s)%s", result.source, len(result.events),
                    "" if result.ok else f" (failed: {result.error})")
    return AggregateResult(results=results)
