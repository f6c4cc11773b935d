"""Settings for the collector service.

Values come from the environment. ``.env.local`` is read first, then a plain
``.env``; variables already set in the process environment win over both.
"""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_PATH = Path(__file__).resolve().parent.parent

load_dotenv(BASE_PATH / ".env.local")
load_dotenv()

# Search provider
TAVILY_API_KEY: str | None = os.getenv("TAVILY_API_KEY")
TAVILY_API_URL: str = os.getenv("TAVILY_API_URL", "https://api.tavily.com/search")
TAVILY_SEARCH_DEPTH: str = "advanced"
TAVILY_DATE_MAX_RESULTS: int = 10
TAVILY_DISCOVER_MAX_RESULTS: int = 50

# Page fetching
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))
SEARCH_TIMEOUT: int = int(os.getenv("SEARCH_TIMEOUT", "60"))
USER_AGENT: str = "Mozilla/5.0"

# Cache windows, in seconds
CACHE_TTL_SECONDS: float = float(os.getenv("CACHE_TTL_SECONDS", str(10 * 60)))
CACHE_FLUSH_SECONDS: float = float(os.getenv("CACHE_FLUSH_SECONDS", str(30 * 60)))

CITY: str = os.getenv("EVENTS_CITY", "Seattle")
SOURCE_CATALOG: Path = Path(os.getenv("SOURCE_CATALOG", str(BASE_PATH / "sources" / "seattle.json")))


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing."""


def require_api_key() -> str:
    """Return the Tavily API key or raise :class:`ConfigurationError`."""
    if not TAVILY_API_KEY:
        raise ConfigurationError("TAVILY_API_KEY not found in environment or .env.local")
    return TAVILY_API_KEY
