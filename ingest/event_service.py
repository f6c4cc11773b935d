"""Service layer tying sources, cache, enrichment and filtering together."""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from scrapers.aggregator import aggregate_sources
from scrapers.enricher import DEFAULT_CATEGORIES, discover_events, enrich_events_for_date
from scrapers.utils import parse_iso_date

from .cache import EventCache
from .config import CITY
from .query_filter import filter_events, restrict_to_dates
from .schemas import AggregateResult, EnrichmentResult, EventRecord, SearchResult
from .search_client import TavilySearchClient
from .source_catalog import EventSource

logger = logging.getLogger(__name__)


class EventService:
    """Owns the source list, the search client and the cache."""

    def __init__(
        self,
        sources: Sequence[EventSource],
        search_client: TavilySearchClient,
        cache: Optional[EventCache] = None,
        city: str = CITY,
    ):
        self.sources = list(sources)
        self.search_client = search_client
        self.cache = cache if cache is not None else EventCache()
        self.city = city

    def list_sources(self) -> List[dict[str, str]]:
        return [source.summary() for source in self.sources]

    def list_categories(self) -> List[str]:
        return list(DEFAULT_CATEGORIES)

    def _aggregate(self) -> AggregateResult:
        return aggregate_sources(self.sources)

    def get_all_events(self) -> AggregateResult:
        """Every source's current listing, cached."""
        return self.cache.get_all(self._aggregate)

    def _load_date(self, date_string: str) -> EnrichmentResult:
        try:
            day: date = parse_iso_date(date_string)
        except ValueError as exc:
            logger.error("Error getting events for date %s: %s", date_string, exc)
            return EnrichmentResult(date=date_string, events=[], error=str(exc))

        outcome: dict[str, EnrichmentResult] = {}

        def enrich(source: EventSource, events: List[EventRecord]) -> List[EventRecord]:
            result = enrich_events_for_date(
                date_string, events, self.search_client,
                domains=source.search_domains, city=self.city,
            )
            outcome[source.id] = result
            if not result.ok:
                raise RuntimeError(f"enrichment failed: {result.error}")
            return result.events

        aggregated = aggregate_sources(self.sources, month=day.month, year=day.year, enrich=enrich)
        formatted = next((r.date for r in outcome.values() if r.ok), date_string)
        errors = [f"{r.source}: {r.error}" for r in aggregated.results if not r.ok]
        return EnrichmentResult(
            date=formatted,
            events=aggregated.events,
            error="; ".join(errors) or None,
        )

    def get_events_for_date(self, date_string: str) -> EnrichmentResult:
        """Enriched events for ``date_string`` (``YYYY-MM-DD``), cached per date."""
        return self.cache.get_date(date_string, lambda: self._load_date(date_string))

    def search(
        self,
        q: Optional[str] = None,
        category: Optional[str] = None,
        city: Optional[str] = None,
        date: Optional[str] = None,
    ) -> SearchResult:
        """Filter the cached events; ``date`` intersects with the date lookup."""
        aggregated = self.get_all_events()
        events = filter_events(aggregated.events, q=q, category=category, city=city)
        failed = list(aggregated.failed_sources)

        if date:
            date_result = self.get_events_for_date(date)
            events = restrict_to_dates(events, date_result.events)
            if not date_result.ok:
                logger.warning("Date lookup for %s degraded: %s", date, date_result.error)

        return SearchResult(events=events, failed_sources=failed)

    def discover(
        self,
        q: Optional[str] = None,
        city: Optional[str] = None,
        category: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> EnrichmentResult:
        """Free-text search straight against the search provider."""
        return discover_events(
            self.search_client, query=q, city=city, category=category,
            start_date=start_date, end_date=end_date,
        )
