"""Cache: TTL response cache with single-flight loads and stale-on-429."""

from trader_sync.cache.response_cache import ResponseCache, CacheEntry

__all__ = ["ResponseCache", "CacheEntry"]
