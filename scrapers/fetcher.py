"""Fetch raw HTML for event source pages."""
from __future__ import annotations

import logging

import requests

from ingest.config import REQUEST_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)


def fetch_html(url: str, timeout: int = REQUEST_TIMEOUT) -> str:
    """Return the body of ``url`` fetched with a browser UA.

    Raises ``requests.RequestException`` on transport errors and non-2xx
    responses; callers decide how to degrade.
    """
    logger.info("GET %s", url)
    resp = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
    resp.raise_for_status()
    return resp.text
