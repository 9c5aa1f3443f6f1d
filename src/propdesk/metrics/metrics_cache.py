# PropDesk Metrics Cache
"""
Short-TTL cache for computed account metrics.

Owned and injected by the caller (see ``AccountMetricsService``); callers
invalidate an account whenever its trades or settings change.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Generic, List, Optional, TypeVar

from propdesk.core.clock import IClock, SystemClock
from propdesk.core.config import METRICS_CACHE_TTL_SECONDS

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    data: T
    stored_at: datetime
    expires_at: datetime


@dataclass
class CacheStats:
    size: int
    hits: int
    misses: int
    keys: List[str]

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class MetricsCache(Generic[T]):
    """
    In-memory TTL cache keyed by account id.
    """

    def __init__(self, clock: Optional[IClock] = None, ttl_seconds: int = METRICS_CACHE_TTL_SECONDS) -> None:
        self._clock = clock or SystemClock()
        self._ttl = timedelta(seconds=ttl_seconds)
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, account_id: str) -> Optional[T]:
        """Cached value, or None if missing or expired (expired entries are dropped)."""
        entry = self._entries.get(account_id)
        if entry is None:
            self._misses += 1
            return None

        if self._clock.now() >= entry.expires_at:
            del self._entries[account_id]
            self._misses += 1
            return None

        self._hits += 1
        return entry.data

    def set(self, account_id: str, data: T, ttl_seconds: Optional[int] = None) -> None:
        now = self._clock.now()
        ttl = timedelta(seconds=ttl_seconds) if ttl_seconds is not None else self._ttl
        self._entries[account_id] = CacheEntry(data=data, stored_at=now, expires_at=now + ttl)

    def invalidate(self, account_id: str) -> None:
        """Drop one account. Call after any trade or config change for it."""
        self._entries.pop(account_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def cleanup(self) -> int:
        """Remove expired entries. Returns how many were removed."""
        now = self._clock.now()
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def stats(self) -> CacheStats:
        return CacheStats(
            size=len(self._entries),
            hits=self._hits,
            misses=self._misses,
            keys=list(self._entries.keys()),
        )
