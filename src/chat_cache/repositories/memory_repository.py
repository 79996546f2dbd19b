"""In-memory implementation of ResponseStore.

A bounded fingerprint -> response map with quality-weighted eviction and
adaptive expiration. It's the default implementation and satisfies the
ResponseStore protocol.
"""

import re
import threading
import time
from collections.abc import Callable

from chat_cache.config import settings
from chat_cache.entities import CacheEntry, ResponsePayload

_CODE_FENCE = "```"
_LIST_MARKER = re.compile(r"^\s*(?:[-*•]|\d+\.)\s", re.MULTILINE)

# Floor for entry age so a brand-new entry never divides by zero.
_MIN_AGE_SECONDS = 0.001


def score_quality(payload: ResponsePayload) -> float:
    """Heuristic quality score of a response in [0, 1].

    Starts at 0.5 and rewards fenced code, list structure and a substantial
    but not excessive length.
    """
    text = payload.text
    score = 0.5
    if _CODE_FENCE in text:
        score += 0.3
    if _LIST_MARKER.search(text):
        score += 0.1
    if 50 <= len(text) <= 2000:
        score += 0.2
    return max(0.0, min(score, 1.0))


class InMemoryResponseCache:
    """Bounded response cache with quality-weighted eviction.

    This class satisfies the ResponseStore protocol through structural
    typing - no explicit inheritance needed.

    - Every hit bumps the entry's popularity by ``1 + quality``
    - Entries expire at ``created_at + base_ttl * (1 + quality * 0.5)``
    - At capacity, the entry with the lowest
      ``quality * popularity / age_seconds`` is evicted

    All operations hold a lock, so a cache shared between server threads
    keeps its capacity bound.
    """

    def __init__(
        self,
        max_entries: int | None = None,
        default_ttl: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            max_entries: Maximum number of entries. Defaults to settings.
            default_ttl: Default base TTL in seconds. Defaults to settings.
            clock: Returns the current time in seconds (injectable for tests).
        """
        self._max_entries = settings.cache_max_entries if max_entries is None else max_entries
        self._default_ttl = settings.cache_ttl if default_ttl is None else default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._popularity: dict[str, float] = {}
        self._lock = threading.Lock()
        self._evictions = 0

        if self._max_entries < 1:
            raise ValueError("max_entries must be at least 1")

    @classmethod
    def create(
        cls,
        max_entries: int | None = None,
        default_ttl: float | None = None,
    ) -> "InMemoryResponseCache":
        """Factory method to create InMemoryResponseCache with defaults.

        Args:
            max_entries: Capacity. If None, uses settings.
            default_ttl: Base TTL in seconds. If None, uses settings.

        Returns:
            Configured InMemoryResponseCache
        """
        return cls(max_entries=max_entries, default_ttl=default_ttl)

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: str) -> ResponsePayload | None:
        """Look up a cached response.

        Args:
            key: The conversation fingerprint

        Returns:
            The cached payload, or None if absent or expired
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if entry.is_expired(self._clock()):
                self._remove(key)
                return None

            self._popularity[key] = self._popularity.get(key, 0.0) + 1 + entry.quality
            return entry.payload

    def set(
        self,
        key: str,
        payload: ResponsePayload,
        base_ttl: float | None = None,
        quality: float | None = None,
    ) -> None:
        """Store a response, evicting one entry first if the cache is full.

        Args:
            key: The conversation fingerprint
            payload: The response to cache
            base_ttl: Base TTL in seconds. Defaults to the cache default.
            quality: Explicit quality score. Computed from the payload if None.
        """
        if quality is None:
            quality = score_quality(payload)
        quality = max(0.0, min(quality, 1.0))

        with self._lock:
            now = self._clock()
            if key not in self._entries and len(self._entries) >= self._max_entries:
                self._purge_expired(now)
                if len(self._entries) >= self._max_entries:
                    self._evict_one(now)

            # Re-inserting moves the key to the end of insertion order.
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(
                payload=payload,
                created_at=now,
                base_ttl=self._default_ttl if base_ttl is None else base_ttl,
                quality=quality,
            )
            self._popularity[key] = quality * 10

    def delete(self, key: str) -> bool:
        """Delete a specific entry.

        Returns:
            True if deleted, False otherwise
        """
        with self._lock:
            if key not in self._entries:
                return False
            self._remove(key)
            return True

    def clear(self) -> int:
        """Clear all entries.

        Returns:
            Number of entries deleted
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._popularity.clear()
            return count

    def popularity(self, key: str) -> float:
        """Current popularity counter of an entry (0.0 when absent)."""
        with self._lock:
            return self._popularity.get(key, 0.0)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with size, capacity, TTL and popularity figures
        """
        with self._lock:
            popularity = list(self._popularity.values())
            return {
                "total_entries": len(self._entries),
                "max_entries": self._max_entries,
                "ttl": self._default_ttl,
                "evictions": self._evictions,
                "avg_popularity": sum(popularity) / len(popularity) if popularity else 0.0,
            }

    def _remove(self, key: str) -> None:
        self._entries.pop(key, None)
        self._popularity.pop(key, None)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            self._remove(key)

    def _evict_one(self, now: float) -> None:
        victim: str | None = None
        lowest = float("inf")

        # Strict comparison: ties go to the oldest insertion.
        for key, entry in self._entries.items():
            age = max(now - entry.created_at, _MIN_AGE_SECONDS)
            score = entry.quality * self._popularity.get(key, 0.0) / age
            if score < lowest:
                lowest = score
                victim = key

        if victim is not None:
            self._remove(victim)
            self._evictions += 1
