"""FastAPI application for the Seattle Events API."""
import asyncio
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ingest.config import require_api_key
from ingest.event_service import EventService
from ingest.schemas import EventRecord
from ingest.search_client import TavilySearchClient
from ingest.source_catalog import load_sources

logger = logging.getLogger(__name__)

VERSION = "1.0.0"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

app = FastAPI(
    title="Seattle Events API",
    description="Seattle event listings scraped from events12.com and lu.ma, enriched via Tavily",
    version=VERSION,
)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

# Thread pool for running the blocking scrapers off the event loop
executor = ThreadPoolExecutor(max_workers=4)


class EventModel(BaseModel):
    """Event as returned by the API."""
    title: str
    date: str
    is_free: bool
    description: Optional[str] = None
    location: Optional[str] = None
    url: Optional[str] = None
    source: str
    relevant_date: Optional[str] = None


class EventsResponse(BaseModel):
    events: List[EventModel]


class DateEventsResponse(BaseModel):
    date: str
    events: List[EventModel]


class SearchResponse(BaseModel):
    """Search results; ``failed_sources`` is only present when a source failed."""
    events: List[EventModel]
    failed_sources: Optional[List[str]] = None


class SourceModel(BaseModel):
    id: str
    name: str
    url: str


class SourcesResponse(BaseModel):
    sources: List[SourceModel]


class CategoriesResponse(BaseModel):
    categories: List[str]


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: str
    version: str


@lru_cache(maxsize=1)
def get_service() -> EventService:
    """Build the process-wide service from the source catalog and API key."""
    return EventService(load_sources(), TavilySearchClient(require_api_key()))


def _to_models(events: List[EventRecord]) -> List[EventModel]:
    return [EventModel(**event.to_dict()) for event in events]


async def _run(func, *args):
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(executor, func, *args)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=VERSION,
    )


@app.get("/api/events", response_model=EventsResponse)
async def list_events(service: EventService = Depends(get_service)):
    """Return all events from all sources."""
    try:
        result = await _run(service.get_all_events)
    except Exception:
        logger.exception("Error fetching events")
        raise HTTPException(status_code=500, detail="Failed to fetch events")
    return EventsResponse(events=_to_models(result.events))


@app.get("/api/events/search", response_model=SearchResponse, response_model_exclude_unset=True)
async def search_events(
    q: Optional[str] = None,
    category: Optional[str] = None,
    city: Optional[str] = None,
    date: Optional[str] = None,
    service: EventService = Depends(get_service),
):
    """
    Search events.

    - ``q``: any whitespace-separated term must appear in title, description or location
    - ``category``: matched against title and description (``All`` disables it)
    - ``city``: matched against location only
    - ``date``: ``YYYY-MM-DD``, intersected with the enriched events for that day
    """
    try:
        result = await _run(service.search, q, category, city, date)
    except Exception:
        logger.exception("Error searching events")
        raise HTTPException(status_code=500, detail="Failed to search events")

    events = _to_models(result.events)
    if result.failed_sources:
        return SearchResponse(events=events, failed_sources=result.failed_sources)
    return SearchResponse(events=events)


@app.get("/api/events/sources", response_model=SourcesResponse)
async def list_sources(service: EventService = Depends(get_service)):
    """Return the configured event sources."""
    return SourcesResponse(sources=[SourceModel(**s) for s in service.list_sources()])


@app.get("/api/events/categories", response_model=CategoriesResponse)
async def list_categories(service: EventService = Depends(get_service)):
    """Return the category names offered by the search form."""
    return CategoriesResponse(categories=service.list_categories())


@app.get("/api/events/discover", response_model=EventsResponse)
async def discover_events(
    q: Optional[str] = None,
    city: Optional[str] = None,
    category: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    service: EventService = Depends(get_service),
):
    """Free-text event search against the search provider, de-duplicated by URL."""
    try:
        result = await _run(service.discover, q, city, category, start_date, end_date)
    except Exception:
        logger.exception("Error discovering events")
        raise HTTPException(status_code=500, detail="Failed to discover events")
    return EventsResponse(events=_to_models(result.events))


@app.get("/api/events/date/{date}", response_model=DateEventsResponse)
async def events_for_date(date: str, service: EventService = Depends(get_service)):
    """Return events for a specific date (``YYYY-MM-DD``)."""
    if not DATE_PATTERN.match(date):
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")
    try:
        result = await _run(service.get_events_for_date, date)
    except Exception:
        logger.exception("Error fetching events for date")
        raise HTTPException(status_code=500, detail="Failed to fetch events for the specified date")
    return DateEventsResponse(date=result.date, events=_to_models(result.events))


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Seattle Events API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": [
            "GET /api/events",
            "GET /api/events/date/{date}",
            "GET /api/events/search",
            "GET /api/events/sources",
            "GET /api/events/categories",
            "GET /api/events/discover",
        ],
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=3001)
