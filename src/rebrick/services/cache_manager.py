"""
Cache Manager
=============
Process-wide in-memory response cache for Rebrickable API calls.

Key features:
- In-memory caching with a TTL per entry (1 hour by default)
- Lazy expiry on read plus an optional periodic background sweep
- Memory limit with LRU eviction
- One shared store per process by default (see ``get_cache``)
"""

import asyncio
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from rebrick.services.debug_logger import get_logger

logger = get_logger("cache_manager")

T = TypeVar('T')

DEFAULT_TTL = 3600.0  # 1 hour
DEFAULT_MAX_ENTRIES = 2048

Clock = Callable[[], datetime]


class CacheEntry(Generic[T]):
    """A single cached entry with value and expiry time."""

    __slots__ = ("value", "created_at", "expires_at")

    def __init__(self, value: T, ttl_seconds: float, now: datetime):
        self.value = value
        self.created_at = now
        self.expires_at = now + timedelta(seconds=ttl_seconds)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class TTLCache(Generic[T]):
    """
    Key/value store where every entry expires ``ttl`` seconds after insertion.

    Features:
    - TTL-based expiration, checked lazily on every read
    - ``max_entries`` bound with LRU eviction
    - Injectable clock so expiry can be driven without sleeping
    """

    def __init__(
        self,
        name: str = "responses",
        default_ttl: float = DEFAULT_TTL,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Clock = datetime.now,
    ):
        self.name = name
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._cache: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()
        self._cleanup_task: Optional[asyncio.Task] = None
        self.hits = 0
        self.misses = 0

    def get(self, key: str, default: Any = None) -> Any:
        """Get a cached value if it exists and is not expired."""
        entry = self._cache.get(key)
        if entry is None:
            self.misses += 1
            return default

        if entry.is_expired(self._clock()):
            del self._cache[key]
            self.misses += 1
            return default

        # Update access order for LRU
        self._cache.move_to_end(key)
        self.hits += 1
        return entry.value

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> T:
        """Set a cached value, replacing any existing entry for ``key``."""
        ttl = ttl if ttl is not None else self.default_ttl
        self._cache[key] = CacheEntry(value, ttl, self._clock())
        self._cache.move_to_end(key)
        self._evict_if_needed()
        return value

    def has(self, key: str) -> bool:
        """Check if a valid (non-expired) entry exists."""
        entry = self._cache.get(key)
        return entry is not None and not entry.is_expired(self._clock())

    def invalidate(self, key: str):
        """Remove a specific entry from cache."""
        self._cache.pop(key, None)

    def clear(self):
        """Clear all entries."""
        self._cache.clear()
        self.hits = 0
        self.misses = 0

    def cleanup_expired(self) -> int:
        """Remove all expired entries. Returns the number removed."""
        now = self._clock()
        expired_keys = [k for k, v in self._cache.items() if v.is_expired(now)]
        for key in expired_keys:
            del self._cache[key]
        if expired_keys:
            logger.debug(f"[{self.name}] Cleaned up {len(expired_keys)} expired entries")
        return len(expired_keys)

    def _evict_if_needed(self):
        """Evict oldest entries if over max_entries limit."""
        while len(self._cache) > self.max_entries:
            oldest_key, _ = self._cache.popitem(last=False)
            logger.debug(f"[{self.name}] Evicted LRU entry: {oldest_key[:12]}")

    def start_cleanup_task(self, interval: float = 60.0) -> asyncio.Task:
        """Start periodic cleanup (must be called from a running event loop)."""
        async def cleanup_loop():
            while True:
                await asyncio.sleep(interval)
                self.cleanup_expired()

        if self._cleanup_task is None or self._cleanup_task.done():
            self._cleanup_task = asyncio.get_running_loop().create_task(cleanup_loop())
        return self._cleanup_task

    async def stop_cleanup_task(self):
        """Cancel the periodic cleanup task, if running."""
        task, self._cleanup_task = self._cleanup_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def size(self) -> int:
        return len(self._cache)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics for debugging."""
        return {
            "name": self.name,
            "size": self.size,
            "max_entries": self.max_entries,
            "hits": self.hits,
            "misses": self.misses,
        }


# Global cache instance
_cache_instance: Optional[TTLCache] = None


def get_cache() -> TTLCache:
    """Get the process-wide response cache."""
    global _cache_instance
    if _cache_instance is None:
        _cache_instance = TTLCache()
        logger.debug("Process-wide response cache initialized")
    return _cache_instance
