"""
Categorization Cache

Process-wide TTL cache of AI categorization results, keyed by direction and
normalized description. Expired entries are evicted lazily on read.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60


@dataclass
class CacheEntry:
    category: str
    timestamp: float


def cache_key(direction: str, description: str) -> str:
    """Build the cache key: "EXPENSE:timeweb.cloud"."""
    return f"{getattr(direction, 'value', direction)}:{description.lower().strip()}"


class TTLCache:
    """Thread-safe key/value cache with a fixed time-to-live."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the cache.

        Args:
            ttl_seconds: Entry lifetime
            clock: Time source returning seconds; injectable for tests
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.timestamp > self.ttl_seconds:
                del self._entries[key]
                return None
            return entry.category

    def set(self, key: str, category: str) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(category=category, timestamp=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
