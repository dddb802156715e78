"""
Bounded TTL cache in front of the catalog API.
"""
import threading
import logging
from collections import OrderedDict
from datetime import datetime
from typing import Dict, Optional, Callable, Any

from config.settings import settings
from .core import CacheEntry, CacheSource, DataCategory
from .coalescer import RequestCoalescer
from .ttl_policies import get_ttl_for_category, get_category_for_endpoint

logger = logging.getLogger("cache.manager")


class CacheManager:
    """
    Cache with:
    - TTL per data category
    - Request coalescing for concurrent duplicate lookups
    - Least-recently-used eviction past max_entries

    Failed fetches are never stored.
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        coalesce_timeout: float = 30.0,
    ):
        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._cache_lock = threading.RLock()
        self._coalescer = RequestCoalescer(timeout=coalesce_timeout)
        self._max_entries = max_entries or settings.record_cache_size

        self._stats = {
            "hits": 0,
            "misses": 0,
            "evictions": 0,
        }

    def get(
        self,
        cache_key: str,
        fetch_fn: Callable[[], Any],
        endpoint: str,
    ) -> Any:
        """
        Return cached data for `cache_key`, fetching it on a miss or expiry.

        Errors from fetch_fn propagate to every coalesced caller.
        """
        category = get_category_for_endpoint(endpoint)

        with self._cache_lock:
            entry = self._cache.get(cache_key)
            if entry is not None and entry.is_fresh:
                self._cache.move_to_end(cache_key)
                self._stats["hits"] += 1
                logger.debug(f"CACHE HIT: {cache_key} [age={entry.age_seconds:.1f}s]")
                return entry.data

        if entry is None:
            logger.info(f"CACHE MISS: {cache_key}")
        else:
            logger.info(f"CACHE EXPIRED: {cache_key} [age={entry.age_seconds:.1f}s]")

        data = self._coalescer.get_or_fetch(cache_key, fetch_fn)
        self._store(cache_key, data, category)
        with self._cache_lock:
            self._stats["misses"] += 1
        return data

    def source_for(self, cache_key: str) -> CacheSource:
        with self._cache_lock:
            entry = self._cache.get(cache_key)
            if entry is not None and entry.is_fresh:
                return CacheSource.FRESH
            return CacheSource.UPSTREAM

    def _store(self, cache_key: str, data: Any, category: DataCategory) -> None:
        entry = CacheEntry(
            data=data,
            fetched_at=datetime.utcnow(),
            ttl_seconds=get_ttl_for_category(category),
            category=category,
        )
        with self._cache_lock:
            self._cache[cache_key] = entry
            self._cache.move_to_end(cache_key)
            while len(self._cache) > self._max_entries:
                evicted, _ = self._cache.popitem(last=False)
                self._stats["evictions"] += 1
                logger.debug(f"Evicted {evicted}")

    def invalidate(self, cache_key: str) -> bool:
        """
        Invalidate a specific cache entry.

        Returns:
            True if entry was found and removed
        """
        with self._cache_lock:
            if cache_key in self._cache:
                del self._cache[cache_key]
                logger.info(f"Invalidated cache: {cache_key}")
                return True
            return False

    def clear(self) -> int:
        """Clear all entries and return how many were removed."""
        with self._cache_lock:
            count = len(self._cache)
            self._cache.clear()
            logger.info(f"Cleared {count} cache entries")
            return count

    def get_stats(self) -> Dict[str, Any]:
        with self._cache_lock:
            total = self._stats["hits"] + self._stats["misses"]
            hit_rate = (self._stats["hits"] / total * 100) if total > 0 else 0

            return {
                "entries": len(self._cache),
                "hits": self._stats["hits"],
                "misses": self._stats["misses"],
                "evictions": self._stats["evictions"],
                "hit_rate_percent": round(hit_rate, 1),
                "in_flight": self._coalescer.active_requests,
            }
