"""In-memory LRU cache with TTL expiry and metrics.

This module provides the process-wide key/value cache used by the query
optimizer and the response-cache middleware. Entries expire after their TTL,
the least recently used entry is evicted when the cache is full, and hit /
miss / eviction counters are kept for the admin performance endpoints.
"""

from __future__ import annotations

import json
import threading
import time
from collections import OrderedDict
from dataclasses import asdict, dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from portfolio_cms.core.logging_config import get_logger

logger = get_logger(__name__)

Clock = Callable[[], float]
RemovalListener = Callable[[str], None]

DEFAULT_ITEM_SIZE = 100


@dataclass(frozen=True)
class CacheConfig:
    """Configuration of a :class:`CacheManager`.

    Attributes:
        default_ttl: Lifetime of an entry in seconds when ``set`` gets no TTL
        max_items: Maximum number of entries kept before LRU eviction
        enable_metrics: Whether hit/miss counters are collected
    """

    default_ttl: float = 3600
    max_items: int = 1000
    enable_metrics: bool = True


@dataclass
class CacheItem:
    """A single cached value and its bookkeeping."""

    key: str
    value: Any
    ttl: float
    created_at: float
    last_accessed: float
    access_count: int = 0
    size: int = DEFAULT_ITEM_SIZE

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl


@dataclass
class CacheMetrics:
    """Counters describing cache activity since the last ``clear``."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    evictions: int = 0
    memory_usage: int = 0

    @property
    def hit_rate(self) -> float:
        """Hit rate as a percentage rounded to two decimals."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return round(self.hits / total * 100, 2)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["hit_rate"] = self.hit_rate
        return data


@dataclass
class CacheStats:
    """Summary of the cache state."""

    memory_items: int
    hit_rate: float
    memory_usage: int
    max_items: int
    default_ttl: float
    metrics: Dict[str, Any] = field(default_factory=dict)


def estimate_size(value: Any) -> int:
    """Estimate the memory footprint of a value in bytes.

    The estimate is twice the length of its JSON encoding (two bytes per
    character); values that cannot be encoded count as ``DEFAULT_ITEM_SIZE``.
    """
    try:
        return len(json.dumps(value, default=str)) * 2
    except (TypeError, ValueError):
        return DEFAULT_ITEM_SIZE


class CacheManager:
    """Thread-safe LRU cache with per-entry TTL.

    Entries are kept in an ``OrderedDict`` ordered from least to most recently
    used. Reads move the entry to the end; inserting a new key into a full cache
    evicts from the front.
    """

    def __init__(self, config: Optional[CacheConfig] = None, clock: Clock = time.monotonic) -> None:
        """Initialize the cache.

        Args:
            config: Cache configuration, defaults to :class:`CacheConfig`
            clock: Monotonic time source in seconds, injectable for tests
        """
        self.config = config or CacheConfig()
        self._clock = clock
        self._items: "OrderedDict[str, CacheItem]" = OrderedDict()
        self._metrics = CacheMetrics()
        self._lock = threading.RLock()
        self._removal_listeners: List[RemovalListener] = []

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value for ``key`` or ``None``.

        An expired entry is removed, counted as an eviction and reported as a miss.
        """
        with self._lock:
            item = self._items.get(key)
            if item is None:
                self._record("misses")
                return None

            now = self._clock()
            if item.is_expired(now):
                self._remove(key)
                self._record("evictions")
                self._record("misses")
                return None

            item.last_accessed = now
            item.access_count += 1
            self._items.move_to_end(key)
            self._record("hits")
            return item.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        """Store ``value`` under ``key``.

        Args:
            key: Cache key
            value: Value to cache, ideally JSON-serialisable
            ttl: Lifetime in seconds, defaults to ``config.default_ttl``

        Returns:
            False when the TTL is not positive and nothing was stored, True otherwise.
        """
        effective_ttl = self.config.default_ttl if ttl is None else ttl
        if effective_ttl <= 0:
            logger.debug(f"Refusing to cache '{key}' with non-positive ttl={effective_ttl}")
            return False

        with self._lock:
            if key in self._items:
                self._remove(key)
            elif len(self._items) >= self.config.max_items:
                self._evict_lru()

            now = self._clock()
            item = CacheItem(
                key=key,
                value=value,
                ttl=effective_ttl,
                created_at=now,
                last_accessed=now,
                size=estimate_size(value),
            )
            self._items[key] = item
            self._metrics.memory_usage += item.size
            self._record("sets")
            return True

    def delete(self, key: str) -> bool:
        """Remove ``key`` from the cache; returns whether it existed."""
        with self._lock:
            if key not in self._items:
                return False
            self._remove(key)
            self._record("deletes")
            return True

    def clear(self) -> None:
        """Remove every entry and reset the metrics."""
        with self._lock:
            keys = list(self._items)
            self._items.clear()
            self._metrics = CacheMetrics()
            for key in keys:
                self._notify_removed(key)
        logger.info("Cache cleared")

    def cleanup_expired(self) -> int:
        """Remove all expired entries and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, item in self._items.items() if item.is_expired(now)]
            for key in expired:
                self._remove(key)
                self._record("evictions")
        if expired:
            logger.debug(f"Removed {len(expired)} expired cache entries")
        return len(expired)

    def has(self, key: str) -> bool:
        """Return whether ``key`` holds a live entry without touching metrics or LRU order."""
        with self._lock:
            item = self._items.get(key)
            return item is not None and not item.is_expired(self._clock())

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._items.keys())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __len__(self) -> int:
        return len(self._items)

    def add_removal_listener(self, listener: RemovalListener) -> None:
        """Call ``listener(key)`` whenever an entry leaves the cache.

        Fires for deletes, overwrites, clears, TTL expiry and LRU eviction. Listeners
        run while the cache lock is held and must not call back into the cache.
        """
        with self._lock:
            self._removal_listeners.append(listener)

    # ------------------------------------------------------------------
    # Async helpers
    # ------------------------------------------------------------------

    async def get_or_set(
        self, key: str, factory: Callable[[], Awaitable[Any]], ttl: Optional[float] = None
    ) -> Any:
        """Return the cached value or await ``factory`` and cache its result.

        ``None`` results are returned but never cached.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        value = await factory()
        if value is not None:
            self.set(key, value, ttl)
        return value

    async def warmup(
        self, entries: Iterable[Tuple[str, Callable[[], Awaitable[Any]]]], ttl: Optional[float] = None
    ) -> int:
        """Populate the cache ahead of traffic.

        Failing factories are logged and skipped.

        Returns:
            Number of entries that were cached.
        """
        warmed = 0
        for key, factory in entries:
            try:
                value = await factory()
            except Exception as e:
                logger.warning(f"Cache warmup failed for key '{key}': {e}")
                continue
            if value is not None and self.set(key, value, ttl):
                warmed += 1
        logger.info(f"Cache warmup completed: {warmed} entries")
        return warmed

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_metrics(self) -> CacheMetrics:
        """Return a snapshot of the metrics."""
        with self._lock:
            return CacheMetrics(**asdict(self._metrics))

    def get_stats(self) -> CacheStats:
        """Return a summary of the cache state."""
        metrics = self.get_metrics()
        return CacheStats(
            memory_items=len(self._items),
            hit_rate=metrics.hit_rate,
            memory_usage=metrics.memory_usage,
            max_items=self.config.max_items,
            default_ttl=self.config.default_ttl,
            metrics=metrics.to_dict(),
        )

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _remove(self, key: str) -> None:
        item = self._items.pop(key, None)
        if item is not None:
            self._metrics.memory_usage = max(0, self._metrics.memory_usage - item.size)
            self._notify_removed(key)

    def _notify_removed(self, key: str) -> None:
        for listener in self._removal_listeners:
            listener(key)

    def _evict_lru(self) -> None:
        if not self._items:
            return
        lru_key = next(iter(self._items))
        self._remove(lru_key)
        self._record("evictions")
        logger.debug(f"Evicted least recently used cache entry '{lru_key}'")

    def _record(self, counter: str) -> None:
        if self.config.enable_metrics:
            setattr(self._metrics, counter, getattr(self._metrics, counter) + 1)


def _build_default_manager() -> CacheManager:
    from portfolio_cms.server.core.config import settings

    cache_settings = settings.cache
    return CacheManager(
        CacheConfig(
            default_ttl=cache_settings.default_ttl,
            max_items=cache_settings.max_items,
            enable_metrics=cache_settings.enable_metrics,
        )
    )


cache_manager = _build_default_manager()


def get_cache_manager() -> CacheManager:
    """Return the process-wide cache manager."""
    return cache_manager
