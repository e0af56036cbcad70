"""
Caching layer.

- ``cache_manager``: in-memory LRU store with TTL and metrics
- ``api_cache``: tag-aware facade with ETag / Cache-Control helpers
- ``query_optimizer``: cached and timed execution of read queries
- ``invalidation``: cache tags and helpers used after admin writes
"""

from .api_cache import ApiCache, ApiCacheConfig, api_cache, get_api_cache
from .cache_manager import CacheConfig, CacheManager, CacheMetrics, cache_manager, get_cache_manager
from .query_optimizer import QueryCacheConfig, QueryOptimizer, get_query_optimizer, query_optimizer

__all__ = [
    "ApiCache",
    "ApiCacheConfig",
    "CacheConfig",
    "CacheManager",
    "CacheMetrics",
    "QueryCacheConfig",
    "QueryOptimizer",
    "api_cache",
    "cache_manager",
    "get_api_cache",
    "get_cache_manager",
    "get_query_optimizer",
    "query_optimizer",
]
