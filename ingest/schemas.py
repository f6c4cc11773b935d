"""Shared data models for the collector service."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, List, Optional


@dataclass
class EventRecord:
    """Simple event schema used throughout the collector service."""

    title: str
    date: str
    is_free: bool = False
    description: Optional[str] = None
    location: Optional[str] = None
    url: Optional[str] = None
    source: str = ""
    relevant_date: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SourceResult:
    """Outcome of collecting one source.

    ``error`` is set when the source failed; ``events`` is then empty.
    """

    source: str
    events: List[EventRecord] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class AggregateResult:
    """Concatenated events from every configured source."""

    results: List[SourceResult] = field(default_factory=list)

    @property
    def events(self) -> List[EventRecord]:
        events: List[EventRecord] = []
        for result in self.results:
            events.extend(result.events)
        return events

    @property
    def failed_sources(self) -> List[str]:
        return [r.source for r in self.results if not r.ok]


@dataclass
class EnrichmentResult:
    """Events returned by a search-backed lookup."""

    date: str
    events: List[EventRecord] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SearchResult:
    """Filtered events plus the sources that could not be read."""

    events: List[EventRecord] = field(default_factory=list)
    failed_sources: List[str] = field(default_factory=list)
