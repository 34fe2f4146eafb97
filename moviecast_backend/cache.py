"""
In-process response cache shared by the external API clients.

Entries either expire at a fixed instant or are pinned ("never expires"); pinned
entries are only dropped under memory pressure (``max_entries``) or when the
process restarts. The cache is created once at startup and injected into the
clients, so tests can build an isolated instance per test case.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

SEARCH_TTL_SECONDS = 5 * 60
DETAILS_TTL_SECONDS = 10 * 60
IMAGES_TTL_SECONDS = 10 * 60
FORECAST_TTL_SECONDS = 10 * 60
# Provider configuration changes rarely server-side.
CONFIGURATION_TTL_SECONDS: float | None = None

DEFAULT_MAX_ENTRIES = 1024
PURGE_INTERVAL_SECONDS = 10


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    inserted_at: float
    expires_at: float | None = None  # None = pinned

    @property
    def pinned(self) -> bool:
        return self.expires_at is None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class ResponseCache:
    """
    Thread-safe keyed cache with per-entry TTL.

    Readers never see an expired entry: `get` drops it and reports a miss so the
    caller refetches from the source.
    """

    def __init__(
        self,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._purge_task: asyncio.Task | None = None

    @property
    def max_entries(self) -> int:
        return self._max_entries

    async def open(self) -> None:
        """Start the background purge of expired entries."""
        if self._purge_task is None:
            self._purge_task = asyncio.create_task(self._purge_periodically())
        logger.info(f"ResponseCache opened (max_entries={self._max_entries})")

    async def close(self) -> None:
        """Stop the purge task and drop every entry."""
        if self._purge_task:
            self._purge_task.cancel()
            try:
                await self._purge_task
            except asyncio.CancelledError:
                pass
            self._purge_task = None
        self.clear()
        logger.info("ResponseCache closed")

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def get_entry(self, key: str) -> CacheEntry | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.is_expired(self._clock()):
                return None
            return entry

    def set(self, key: str, value: Any, *, ttl_seconds: float | None) -> CacheEntry:
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive (or None to pin the entry)")
        now = self._clock()
        entry = CacheEntry(
            value=value,
            inserted_at=now,
            expires_at=None if ttl_seconds is None else now + ttl_seconds,
        )
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = entry
            if len(self._entries) > self._max_entries:
                self._evict_locked(now, keep=key)
        return entry

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_expired_locked(self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get_entry(key) is not None

    def _purge_expired_locked(self, now: float) -> int:
        expired = [k for k, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def _evict_locked(self, now: float, *, keep: str) -> None:
        """
        Shrink back to `max_entries`: expired first, then oldest expiring, then oldest pinned.

        `keep` (the key just written) is never a victim.
        """
        self._purge_expired_locked(now)
        overflow = len(self._entries) - self._max_entries
        if overflow <= 0:
            return

        expiring = [k for k, entry in self._entries.items() if not entry.pinned and k != keep]
        pinned = [k for k, entry in self._entries.items() if entry.pinned and k != keep]
        victims = (expiring + pinned)[:overflow]
        for key in victims:
            del self._entries[key]
        logger.warning(f"ResponseCache over capacity; evicted {len(victims)} entries")

    async def _purge_periodically(self) -> None:
        while True:
            try:
                await asyncio.sleep(PURGE_INTERVAL_SECONDS)
                purged = self.purge_expired()
                if purged:
                    logger.debug(f"ResponseCache purged {purged} expired entries")
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in cache purge task: {e}")
