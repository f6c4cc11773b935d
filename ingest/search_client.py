"""Client for the Tavily search API."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import requests

from .config import SEARCH_TIMEOUT, TAVILY_API_URL, TAVILY_SEARCH_DEPTH

logger = logging.getLogger(__name__)


class SearchClientError(Exception):
    """Raised when the search API cannot be reached or answers badly."""


class TavilySearchClient:
    """Minimal wrapper over ``POST /search``."""

    def __init__(self, api_key: str, api_url: str = TAVILY_API_URL, timeout: int = SEARCH_TIMEOUT):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout

    def _make_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def search(
        self,
        query: str,
        include_domains: Optional[Iterable[str]] = None,
        max_results: int = 10,
        search_depth: str = TAVILY_SEARCH_DEPTH,
    ) -> list[dict[str, Any]]:
        """Run a search and return the ``results`` list.

        Each result is a dict with ``title``, ``url`` and ``content`` keys.
        """
        payload: dict[str, Any] = {
            "query": query,
            "search_depth": search_depth,
            "max_results": max_results,
        }
        if include_domains:
            payload["include_domains"] = list(include_domains)

        logger.info("POST %s query=%r", self.api_url, query)
        try:
            response = requests.post(
                self.api_url, json=payload, headers=self._make_headers(), timeout=self.timeout
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise SearchClientError(f"Tavily API returned status {response.status_code}") from exc
        except requests.RequestException as exc:
            raise SearchClientError(f"Tavily API request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise SearchClientError("Invalid JSON returned by Tavily") from exc

        results = data.get("results") if isinstance(data, dict) else None
        if results is None:
            return []
        if not isinstance(results, list):
            raise SearchClientError("Tavily response 'results' is not a list")
        return [r for r in results if isinstance(r, dict)]
