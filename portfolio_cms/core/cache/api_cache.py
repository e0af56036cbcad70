"""Tag-aware API response cache.

Wraps the :class:`~portfolio_cms.core.cache.cache_manager.CacheManager` with
cache tags (so admin writes can invalidate every entry derived from a content
type), key construction, ETag generation and HTTP cache headers.
"""

from __future__ import annotations

import base64
import fnmatch
import hashlib
import json
import threading
from dataclasses import dataclass, field
from email.utils import format_datetime, parsedate_to_datetime
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Set

from portfolio_cms.core.logging_config import get_logger

from .cache_manager import CacheManager, cache_manager

logger = get_logger(__name__)

STALE_IF_ERROR_SECONDS = 300
REVALIDATE_WINDOW = timedelta(seconds=60)


@dataclass(frozen=True)
class ApiCacheConfig:
    """Caching policy for an API response or query result.

    Attributes:
        ttl: Lifetime in seconds; ``0`` means "do not cache" and emits ``no-cache``
        tags: Invalidation tags the entry belongs to
        vary: Request headers that take part in the cache key
        stale_while_revalidate: Seconds a stale response may be served while refreshing
        revalidate_on_background: Adds ``stale-if-error`` to the Cache-Control header
    """

    ttl: int = 300
    tags: Sequence[str] = ()
    vary: Sequence[str] = ()
    stale_while_revalidate: Optional[int] = None
    revalidate_on_background: bool = False


@dataclass
class ApiCacheStats:
    cache_stats: Dict[str, Any]
    tag_count: int
    tags: Dict[str, int] = field(default_factory=dict)


class ApiCache:
    """Cache facade keeping a tag -> keys index next to the cache manager.

    The index follows the manager through a removal listener, so keys evicted
    by LRU or TTL leave their tags as well.
    """

    def __init__(self, manager: CacheManager) -> None:
        self.manager = manager
        self._tags: Dict[str, Set[str]] = {}
        self._lock = threading.RLock()
        manager.add_removal_listener(self._forget_key)

    def get(self, key: str) -> Optional[Any]:
        return self.manager.get(key)

    def set(self, key: str, value: Any, config: Optional[ApiCacheConfig] = None) -> bool:
        """Cache ``value`` under ``key`` and register it under the config's tags."""
        config = config or ApiCacheConfig()
        stored = self.manager.set(key, value, config.ttl)
        if stored and config.tags:
            with self._lock:
                for tag in config.tags:
                    self._tags.setdefault(tag, set()).add(key)
        return stored

    def delete(self, key: str) -> bool:
        return self.manager.delete(key)

    def invalidate_by_tag(self, tag: str) -> int:
        """Delete every entry registered under ``tag``.

        Returns:
            Number of cache entries actually removed.
        """
        with self._lock:
            keys = self._tags.pop(tag, set())
        removed = sum(1 for key in keys if self.manager.delete(key))
        logger.info(f"Invalidated {removed} cache entries for tag '{tag}'")
        return removed

    def invalidate_by_pattern(self, pattern: str) -> int:
        """Delete every cached key matching a glob ``pattern`` (``*`` wildcards)."""
        matched = [key for key in self.manager.keys() if fnmatch.fnmatchcase(key, pattern)]
        removed = 0
        for key in matched:
            if self.delete(key):
                removed += 1
        logger.info(f"Invalidated {removed} cache entries matching '{pattern}'")
        return removed

    def reset(self) -> None:
        """Drop all entries and the tag index."""
        self.manager.clear()
        with self._lock:
            self._tags.clear()

    def get_stats(self) -> ApiCacheStats:
        """Manager summary plus the number of live entries under each tag."""
        stats = self.manager.get_stats()
        with self._lock:
            snapshot = {tag: list(keys) for tag, keys in self._tags.items()}
        tags = {tag: sum(1 for key in keys if self.manager.has(key)) for tag, keys in snapshot.items()}
        return ApiCacheStats(
            cache_stats={
                "memory_items": stats.memory_items,
                "hit_rate": stats.hit_rate,
                "memory_usage": stats.memory_usage,
            },
            tag_count=len(tags),
            tags=tags,
        )

    def _forget_key(self, key: str) -> None:
        with self._lock:
            for keys in self._tags.values():
                keys.discard(key)

    # ------------------------------------------------------------------
    # Keys and HTTP helpers
    # ------------------------------------------------------------------

    @staticmethod
    def create_cache_key(prefix: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Build ``prefix:<base64 of key-sorted JSON params>``.

        ``None`` values are dropped so optional filters do not fragment the cache.
        """
        cleaned = {k: v for k, v in sorted((params or {}).items()) if v is not None}
        encoded = base64.urlsafe_b64encode(
            json.dumps(cleaned, sort_keys=True, separators=(",", ":"), default=str).encode("utf-8")
        ).decode("ascii")
        return f"{prefix}:{encoded}"

    @staticmethod
    def generate_etag(body: bytes | str) -> str:
        """Quoted MD5 hex digest of a response body."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        return f'"{hashlib.md5(body).hexdigest()}"'

    @staticmethod
    def get_cache_headers(
        config: ApiCacheConfig, etag: Optional[str] = None, last_modified: Optional[datetime] = None
    ) -> Dict[str, str]:
        directives: List[str] = [f"max-age={config.ttl}" if config.ttl > 0 else "no-cache"]
        if config.stale_while_revalidate:
            directives.append(f"stale-while-revalidate={config.stale_while_revalidate}")
        if config.revalidate_on_background:
            directives.append(f"stale-if-error={STALE_IF_ERROR_SECONDS}")

        headers = {
            "Cache-Control": ", ".join(directives),
            "Last-Modified": format_datetime(last_modified or datetime.now(timezone.utc), usegmt=True),
        }
        if etag:
            headers["ETag"] = etag
        if config.vary:
            headers["Vary"] = ", ".join(config.vary)
        return headers

    @staticmethod
    def should_revalidate(
        if_none_match: Optional[str], if_modified_since: Optional[str], etag: Optional[str] = None
    ) -> bool:
        """Return True when the client copy is stale and a full response is needed.

        A matching ``If-None-Match`` means the client copy is current. Otherwise an
        ``If-Modified-Since`` within the last minute is treated as current too.
        """
        if if_none_match and etag:
            return not etag_matches(if_none_match, etag)
        if if_modified_since:
            try:
                since = parsedate_to_datetime(if_modified_since)
            except (TypeError, ValueError):
                return True
            if since.tzinfo is None:
                since = since.replace(tzinfo=timezone.utc)
            return datetime.now(timezone.utc) - since > REVALIDATE_WINDOW
        return True


def _opaque_tag(value: str) -> str:
    value = value.strip()
    return value[2:] if value.startswith("W/") else value


def etag_matches(if_none_match: str, etag: str) -> bool:
    """Weak comparison of an ``If-None-Match`` header against ``etag``.

    The header may list several tags separated by commas, use ``W/`` weak
    prefixes or be ``*``, which matches any current representation.
    """
    candidates = [_opaque_tag(part) for part in if_none_match.split(",") if part.strip()]
    return "*" in candidates or _opaque_tag(etag) in candidates


api_cache = ApiCache(cache_manager)


def get_api_cache() -> ApiCache:
    """Return the process-wide API cache."""
    return api_cache
