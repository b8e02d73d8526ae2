"""In-memory TTL cache for assembled news batches.

Process-scoped soft cache: one live entry per key, writes overwrite, entries
expire after a fixed TTL. Expired entries are dropped when read and swept in
bulk on write once the check period has elapsed. There is no size bound; the
key space is the latest batch plus one key per pagination cursor seen.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from newsproxy.config.settings import DEFAULT_CACHE_CHECK_PERIOD_SECONDS, DEFAULT_NEWS_CACHE_TTL_SECONDS

LATEST_NEWS_KEY = "news:latest"
MORE_NEWS_KEY_PREFIX = "more:"

V = TypeVar("V")


def more_news_key(cursor: str) -> str:
    """Cache key of the batch fetched from *cursor*."""
    return f"{MORE_NEWS_KEY_PREFIX}{cursor}"


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    key: str
    value: V
    expires_at: float


class TTLCache(Generic[V]):
    """Key-value store with per-entry expiry."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_NEWS_CACHE_TTL_SECONDS,
        check_period_seconds: float = DEFAULT_CACHE_CHECK_PERIOD_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._check_period = check_period_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[V]] = {}
        self._last_sweep = clock()

    def get(self, key: str) -> Optional[V]:
        """Return the live value for *key*, or None on a miss."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: V, ttl_seconds: Optional[float] = None) -> None:
        """Store *value* under *key*, replacing any previous entry."""
        now = self._clock()
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        self._entries[key] = CacheEntry(key=key, value=value, expires_at=now + ttl)
        if now - self._last_sweep >= self._check_period:
            self.purge_expired()

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        self._last_sweep = now
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None
