"""In-memory cache for aggregated and per-date event results."""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, TypeVar

from .config import CACHE_FLUSH_SECONDS, CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventCache:
    """Holds the last full aggregation and per-date lookups.

    The full aggregation is served for ``ttl`` seconds after it was loaded.
    Every ``flush_interval`` seconds both slots are dropped; the flush happens
    on the first access after the interval, measured with ``clock``.

    Each slot (the aggregation, and every date key) has its own refill lock,
    so an expired slot is loaded once even when several threads ask for it,
    while a slow load never holds up reads of other slots. The shared state
    lock is only held for checks and writes, never across ``loader()``.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        ttl: float = CACHE_TTL_SECONDS,
        flush_interval: float = CACHE_FLUSH_SECONDS,
    ):
        self.clock = clock
        self.ttl = ttl
        self.flush_interval = flush_interval
        self._lock = threading.Lock()
        self._all_lock = threading.Lock()
        self._date_locks: Dict[str, threading.Lock] = {}
        self._all: Optional[Any] = None
        self._all_loaded_at: Optional[float] = None
        self._dates: Dict[str, Any] = {}
        self._last_flush = clock()

    def _clear(self) -> None:
        self._all = None
        self._all_loaded_at = None
        self._dates = {}
        self._last_flush = self.clock()
        logger.info("Cache cleared")

    def flush(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._clear()

    def _flush_if_due(self) -> None:
        if self.clock() - self._last_flush >= self.flush_interval:
            self._clear()

    def _all_is_fresh(self) -> bool:
        return (
            self._all is not None
            and self._all_loaded_at is not None
            and self.clock() - self._all_loaded_at < self.ttl
        )

    def _date_lock(self, key: str) -> threading.Lock:
        with self._lock:
            return self._date_locks.setdefault(key, threading.Lock())

    def get_all(self, loader: Callable[[], T]) -> T:
        """Return the cached aggregation, calling ``loader`` when stale."""
        with self._lock:
            self._flush_if_due()
            if self._all_is_fresh():
                logger.info("Returning cached events data")
                return self._all

        with self._all_lock:
            with self._lock:
                if self._all_is_fresh():
                    return self._all
            logger.info("Fetching fresh events data")
            value = loader()
            with self._lock:
                self._all = value
                self._all_loaded_at = self.clock()
            return value

    def get_date(self, key: str, loader: Callable[[], T]) -> T:
        """Return the cached lookup for ``key``, calling ``loader`` on a miss."""
        with self._lock:
            self._flush_if_due()
            if key in self._dates:
                logger.info("Returning cached events for date: %s", key)
                return self._dates[key]

        with self._date_lock(key):
            with self._lock:
                if key in self._dates:
                    return self._dates[key]
            logger.info("Fetching events for date: %s", key)
            value = loader()
            with self._lock:
                self._dates[key] = value
            return value
