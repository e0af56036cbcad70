"""Cached, instrumented execution of database read queries.

Every public read goes through :meth:`QueryOptimizer.optimized_query`, which
serves results from the API cache when possible, times the query otherwise and
keeps per-query statistics including the slowest recent executions.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional, Sequence, TypeVar

from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.monitoring import log_slow_query

from .api_cache import ApiCache, ApiCacheConfig, api_cache

logger = get_logger(__name__)

T = TypeVar("T")

SLOW_QUERY_HISTORY = 100
TOP_SLOW_QUERIES = 10


@dataclass(frozen=True)
class QueryCacheConfig:
    """Caching policy of a named query.

    Attributes:
        ttl: Lifetime of a cached result in seconds
        tags: Invalidation tags
        use_cache: When False the query always hits the database
    """

    ttl: int = 300
    tags: Sequence[str] = ()
    use_cache: bool = True


@dataclass
class SlowQuery:
    query_name: str
    duration_ms: float
    timestamp: str


@dataclass
class _QueryRecord:
    count: int = 0
    errors: int = 0
    from_cache: int = 0
    total_time_ms: float = 0.0
    slow: Deque[SlowQuery] = field(default_factory=lambda: deque(maxlen=SLOW_QUERY_HISTORY))


@dataclass
class QueryStats:
    query_count: int
    total_execution_time_ms: float
    average_execution_time_ms: float
    cache_hit_rate: float
    slow_queries: List[Dict[str, Any]]
    queries: Dict[str, Dict[str, Any]]


class QueryOptimizer:
    """Run named async queries through the cache and record their timings."""

    def __init__(self, cache: ApiCache, slow_query_threshold_ms: float = 100.0) -> None:
        self.cache = cache
        self.slow_query_threshold_ms = slow_query_threshold_ms
        self._records: Dict[str, _QueryRecord] = {}
        self._lock = threading.Lock()

    @staticmethod
    def build_cache_key(query_name: str, params: Optional[Dict[str, Any]] = None) -> str:
        return ApiCache.create_cache_key(f"query:{query_name}", params)

    async def optimized_query(
        self,
        query_name: str,
        query_fn: Callable[[], Awaitable[T]],
        cache: Optional[QueryCacheConfig] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> T:
        """Execute ``query_fn`` with caching and timing.

        Args:
            query_name: Logical name used for statistics and the cache key
            query_fn: Zero-argument coroutine function running the query
            cache: Caching policy; ``None`` disables caching for this call
            params: Query parameters that distinguish cached results

        Returns:
            The query result, possibly served from the cache.

        Raises:
            Exception: Whatever ``query_fn`` raises, after it has been recorded.
        """
        use_cache = cache is not None and cache.use_cache
        key = self.build_cache_key(query_name, params)

        if use_cache:
            cached = self.cache.get(key)
            if cached is not None:
                self._record(query_name, 0.0, from_cache=True)
                logger.debug(f"Query '{query_name}' served from cache")
                return cached

        start = time.perf_counter()
        try:
            result = await query_fn()
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            self._record(query_name, duration_ms, error=True)
            logger.error(f"Query '{query_name}' failed after {duration_ms:.2f}ms: {e}")
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        self._record(query_name, duration_ms)

        if duration_ms > self.slow_query_threshold_ms:
            logger.warning(f"Slow query detected: {query_name} took {duration_ms:.2f}ms")
            log_slow_query(query_name, duration_ms, self.slow_query_threshold_ms)

        if use_cache and result is not None:
            self.cache.set(key, result, ApiCacheConfig(ttl=cache.ttl, tags=tuple(cache.tags)))

        return result

    def get_query_stats(self) -> QueryStats:
        """Aggregate statistics over every recorded query."""
        with self._lock:
            records = dict(self._records)
            executed = sum(r.count - r.from_cache for r in records.values())
            total_time = sum(r.total_time_ms for r in records.values())
            slow = [s for r in records.values() for s in r.slow]
            per_query = {
                name: {
                    "count": r.count,
                    "from_cache": r.from_cache,
                    "errors": r.errors,
                    "total_time_ms": round(r.total_time_ms, 2),
                    "average_time_ms": round(r.total_time_ms / (r.count - r.from_cache), 2)
                    if r.count > r.from_cache
                    else 0.0,
                }
                for name, r in records.items()
            }

        slow.sort(key=lambda s: s.duration_ms, reverse=True)
        return QueryStats(
            query_count=sum(r.count for r in records.values()),
            total_execution_time_ms=round(total_time, 2),
            average_execution_time_ms=round(total_time / executed, 2) if executed else 0.0,
            cache_hit_rate=self.cache.manager.get_metrics().hit_rate,
            slow_queries=[
                {"query_name": s.query_name, "duration_ms": round(s.duration_ms, 2), "timestamp": s.timestamp}
                for s in slow[:TOP_SLOW_QUERIES]
            ],
            queries=per_query,
        )

    def reset_stats(self) -> None:
        with self._lock:
            self._records.clear()

    def _record(self, query_name: str, duration_ms: float, from_cache: bool = False, error: bool = False) -> None:
        with self._lock:
            record = self._records.setdefault(query_name, _QueryRecord())
            record.count += 1
            if from_cache:
                record.from_cache += 1
                return
            if error:
                record.errors += 1
            record.total_time_ms += duration_ms
            if duration_ms > self.slow_query_threshold_ms:
                record.slow.append(
                    SlowQuery(
                        query_name=query_name,
                        duration_ms=duration_ms,
                        timestamp=datetime.now(timezone.utc).isoformat(),
                    )
                )


def _build_default_optimizer() -> QueryOptimizer:
    from portfolio_cms.server.core.config import settings

    return QueryOptimizer(api_cache, slow_query_threshold_ms=settings.cache.slow_query_threshold_ms)


query_optimizer = _build_default_optimizer()


def get_query_optimizer() -> QueryOptimizer:
    """Return the process-wide query optimizer."""
    return query_optimizer
