"""In-process TTL cache for aggregated provider results.

One instance lives for the whole process and is handed to the aggregator.
Expired entries are dropped lazily when their key is next read; nothing
sweeps in the background and there is no capacity bound.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from typing import Optional

from .models import CacheEntry, ProviderStatus
from .timeleft import utc_now

logger = logging.getLogger(__name__)


class ResultCache:
    """Maps a credential fingerprint to a result sequence until its TTL lapses."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def put(self, key: str, value: Iterable[ProviderStatus], ttl_ms: int) -> CacheEntry:
        """Store ``value`` under ``key``, replacing any existing entry."""
        now = self._clock()
        entry = CacheEntry(
            value=tuple(value),
            created_at=now,
            expires_at=now + timedelta(milliseconds=ttl_ms),
        )
        with self._lock:
            self._entries[key] = entry
        return entry

    def get(self, key: str) -> Optional[tuple[ProviderStatus, ...]]:
        """Return the live value for ``key``; evict it if it has expired."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_live(now):
                del self._entries[key]
                logger.debug("Cache entry expired at %s", entry.expires_at.isoformat())
                return None
            return entry.value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
