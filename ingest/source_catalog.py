"""Utilities for managing event source catalog."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from .config import SOURCE_CATALOG

DEFAULT_CATALOG = SOURCE_CATALOG


@dataclass
class EventSource:
    """Represents a single event source.

    ``type`` selects the scraper: ``listing`` pages are read with the link
    heuristics, ``aggregator`` pages with JSON-LD first.
    """
    id: str
    name: str
    url: str
    type: str
    city: str
    search_domains: list[str] = field(default_factory=list)

    def summary(self) -> dict[str, str]:
        """Public description of the source used by the API."""
        return {"id": self.id, "name": self.name, "url": self.url}


def load_sources(path: str | Path = DEFAULT_CATALOG) -> list[EventSource]:
    """Load event sources from a JSON catalog file."""
    data = json.loads(Path(path).read_text())
    return [EventSource(**item) for item in data]
