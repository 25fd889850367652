"""
In-memory TTL cache shared by concurrent requests.

Entries are stored whole and replaced whole under a lock, so readers never see
a partially written value. Expired entries are dropped on read and by
``purge_expired`` (run periodically by the app), and the store is bounded:
when full, the oldest inserted entry is evicted first.
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, NamedTuple, Optional

logger = logging.getLogger(__name__)

_MISSING = object()


class CacheEntry(NamedTuple):
    value: Any
    expires_at: float


class TTLCache:
    """Key -> value store with per-entry expiry"""

    def __init__(self, max_entries: int = 1024, clock: Callable[[], float] = time.monotonic):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the live value for ``key`` or ``default`` when absent/expired"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return default
            if entry.expires_at <= self._clock():
                del self._entries[key]
                self.misses += 1
                return default
            self.hits += 1
            return entry.value

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        """Store ``value`` for ``ttl`` seconds, replacing any previous entry"""
        if ttl <= 0:
            self.delete(key)
            return
        entry = CacheEntry(value, self._clock() + ttl)
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = entry
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache full, evicted %s", evicted)

    def delete(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def contains(self, key: Hashable) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    __contains__ = contains

    def purge_expired(self) -> int:
        """Remove every expired entry; returns how many were removed"""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Purged %d expired cache entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict:
        with self._lock:
            return {
                "entries": len(self._entries),
                "maxEntries": self.max_entries,
                "hits": self.hits,
                "misses": self.misses,
            }
