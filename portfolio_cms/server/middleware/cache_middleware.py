"""
Response cache middleware.

Caches successful ``GET`` responses of the public content endpoints in the
tag-aware API cache. Cached responses are served with ``X-Cache: HIT``; a
matching ``If-None-Match`` short-circuits to ``304 Not Modified``. Admin writes
invalidate the tags listed in each rule.
"""

import base64
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from portfolio_cms.core.cache.api_cache import ApiCache, ApiCacheConfig, api_cache
from portfolio_cms.core.cache.invalidation import TAG_BLOGS, TAG_CASE_STUDIES, TAG_PROJECTS
from portfolio_cms.core.logging_config import get_logger

logger = get_logger(__name__)

_PASSTHROUGH_HEADERS = ("content-type",)


@dataclass(frozen=True)
class CacheRule:
    """Caching policy for every path under ``path_prefix``."""

    path_prefix: str
    config: ApiCacheConfig
    bypass: Optional[Callable[[Request], bool]] = None

    def matches(self, path: str) -> bool:
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")


def _has_query_param(*names: str) -> Callable[[Request], bool]:
    def _bypass(request: Request) -> bool:
        return any(name in request.query_params for name in names)

    return _bypass


DEFAULT_CACHE_RULES: Sequence[CacheRule] = (
    CacheRule(
        "/api/blog",
        ApiCacheConfig(ttl=300, tags=(TAG_BLOGS,), vary=("Accept-Encoding",), stale_while_revalidate=600),
        bypass=_has_query_param("preview", "draft", "search"),
    ),
    CacheRule(
        "/api/projects",
        ApiCacheConfig(ttl=600, tags=(TAG_PROJECTS,), vary=("Accept-Encoding",), stale_while_revalidate=1200),
    ),
    CacheRule(
        "/api/case-studies",
        ApiCacheConfig(ttl=900, tags=(TAG_CASE_STUDIES,), vary=("Accept-Encoding",), stale_while_revalidate=1800),
    ),
)


def build_cache_key(request: Request, vary: Sequence[str] = ()) -> str:
    """``METHOD:path?sorted-query`` plus the base64 of the vary header values."""
    query = "&".join(f"{key}={value}" for key, value in sorted(request.query_params.multi_items()))
    key = f"{request.method}:{request.url.path}"
    if query:
        key += f"?{query}"
    if vary:
        values = "|".join(f"{name.lower()}={request.headers.get(name, '')}" for name in vary)
        key += "&vary=" + base64.urlsafe_b64encode(values.encode("utf-8")).decode("ascii")
    return key


class ResponseCacheMiddleware(BaseHTTPMiddleware):
    """Serve and store public API responses through the API cache."""

    def __init__(
        self,
        app,
        rules: Sequence[CacheRule] = DEFAULT_CACHE_RULES,
        cache: ApiCache = api_cache,
        enabled: bool = True,
    ) -> None:
        super().__init__(app)
        self.rules = tuple(rules)
        self.cache = cache
        self.enabled = enabled

    def _match(self, request: Request) -> Optional[CacheRule]:
        if not self.enabled or request.method != "GET":
            return None
        for rule in self.rules:
            if rule.matches(request.url.path):
                if rule.bypass is not None and rule.bypass(request):
                    return None
                return rule
        return None

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rule = self._match(request)
        if rule is None:
            return await call_next(request)

        key = build_cache_key(request, rule.config.vary)
        cached = self.cache.get(key)
        if cached is not None:
            return self._from_cache(request, key, cached)

        response = await call_next(request)
        if response.status_code != 200:
            return response

        body = b""
        async for chunk in response.body_iterator:
            body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

        etag = ApiCache.generate_etag(body)
        cache_headers = ApiCache.get_cache_headers(rule.config, etag)
        headers: Dict[str, str] = {
            name: value for name, value in response.headers.items() if name.lower() in _PASSTHROUGH_HEADERS
        }
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug(f"Not caching non-text response for {key}")
            text = None
        if text is not None:
            self.cache.set(key, {"body": text, "headers": {**headers, **cache_headers}}, rule.config)

        fresh = Response(content=body, status_code=200, headers={**dict(response.headers), **cache_headers})
        fresh.headers["X-Cache"] = "MISS"
        fresh.headers["X-Cache-Key"] = key
        return fresh

    def _from_cache(self, request: Request, key: str, cached: dict) -> Response:
        headers = dict(cached["headers"])
        etag = headers.get("ETag")
        if not ApiCache.should_revalidate(request.headers.get("If-None-Match"), None, etag):
            not_modified = {name: value for name, value in headers.items() if name in ("ETag", "Cache-Control", "Vary")}
            return Response(status_code=304, headers={**not_modified, "X-Cache": "HIT", "X-Cache-Key": key})

        response = Response(content=cached["body"].encode("utf-8"), status_code=200, headers=headers)
        response.headers["X-Cache"] = "HIT"
        response.headers["X-Cache-Key"] = key
        return response
