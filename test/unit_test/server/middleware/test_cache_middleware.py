"""
Unit tests for the response cache middleware.

This test suite covers:
- MISS then HIT for cacheable public endpoints
- Conditional requests answered with 304
- Bypass rules, non-GET methods and error responses
- Tag invalidation through the API cache
"""

from typing import Dict

import pytest
from fastapi import FastAPI, HTTPException, Request
from httpx import ASGITransport, AsyncClient

from portfolio_cms.core.cache.api_cache import ApiCache
from portfolio_cms.core.cache.cache_manager import CacheConfig, CacheManager
from portfolio_cms.server.middleware.cache_middleware import ResponseCacheMiddleware, build_cache_key


@pytest.fixture
def cache() -> ApiCache:
    return ApiCache(CacheManager(CacheConfig(default_ttl=60, max_items=100)))


@pytest.fixture
def calls() -> Dict[str, int]:
    return {}


@pytest.fixture
def app(cache: ApiCache, calls: Dict[str, int]) -> FastAPI:
    app = FastAPI()
    app.add_middleware(ResponseCacheMiddleware, cache=cache)

    def count(name: str) -> int:
        calls[name] = calls.get(name, 0) + 1
        return calls[name]

    @app.get("/api/blog")
    async def blog(request: Request):
        return {"call": count("blog"), "query": dict(request.query_params)}

    @app.get("/api/projects/{slug}")
    async def project(slug: str):
        if slug == "missing":
            raise HTTPException(status_code=404, detail="Project not found")
        return {"call": count("project"), "slug": slug}

    @app.post("/api/blog")
    async def create_blog():
        return {"call": count("post")}

    @app.get("/api/skills")
    async def skills():
        return {"call": count("skills")}

    return app


@pytest.fixture
async def http(app: FastAPI):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client


class TestCaching:
    async def test_miss_then_hit(self, http: AsyncClient, calls: Dict[str, int]):
        first = await http.get("/api/blog")
        second = await http.get("/api/blog")

        assert first.headers["X-Cache"] == "MISS"
        assert second.headers["X-Cache"] == "HIT"
        assert second.json() == first.json()
        assert calls["blog"] == 1
        assert second.headers["ETag"] == first.headers["ETag"]
        assert "max-age=300" in first.headers["Cache-Control"]
        assert "stale-while-revalidate=600" in first.headers["Cache-Control"]

    async def test_query_string_is_part_of_key(self, http: AsyncClient, calls: Dict[str, int]):
        await http.get("/api/blog?page=1")
        await http.get("/api/blog?page=2")
        await http.get("/api/blog?page=1")
        assert calls["blog"] == 2

    async def test_ttl_per_rule(self, http: AsyncClient):
        response = await http.get("/api/projects/bot")
        assert "max-age=600" in response.headers["Cache-Control"]

    async def test_if_none_match_returns_304(self, http: AsyncClient):
        first = await http.get("/api/blog")
        conditional = await http.get("/api/blog", headers={"If-None-Match": first.headers["ETag"]})

        assert conditional.status_code == 304
        assert conditional.headers["X-Cache"] == "HIT"
        assert conditional.content == b""

    async def test_stale_etag_gets_full_response(self, http: AsyncClient):
        await http.get("/api/blog")
        response = await http.get("/api/blog", headers={"If-None-Match": '"outdated"'})
        assert response.status_code == 200
        assert response.headers["X-Cache"] == "HIT"

    async def test_tag_invalidation_forces_miss(self, http: AsyncClient, cache: ApiCache, calls: Dict[str, int]):
        await http.get("/api/blog")
        assert cache.invalidate_by_tag("blogs") == 1

        response = await http.get("/api/blog")
        assert response.headers["X-Cache"] == "MISS"
        assert calls["blog"] == 2


class TestBypass:
    @pytest.mark.parametrize("query", ["search=python", "preview=1", "draft=true"])
    async def test_blog_bypass_params(self, http: AsyncClient, calls: Dict[str, int], query: str):
        await http.get(f"/api/blog?{query}")
        response = await http.get(f"/api/blog?{query}")
        assert "X-Cache" not in response.headers
        assert calls["blog"] == 2

    async def test_uncached_paths(self, http: AsyncClient, calls: Dict[str, int]):
        await http.get("/api/skills")
        await http.get("/api/skills")
        assert calls["skills"] == 2

    async def test_post_is_not_cached(self, http: AsyncClient, calls: Dict[str, int]):
        await http.post("/api/blog")
        response = await http.post("/api/blog")
        assert "X-Cache" not in response.headers
        assert calls["post"] == 2

    async def test_errors_are_not_cached(self, http: AsyncClient, cache: ApiCache):
        response = await http.get("/api/projects/missing")
        assert response.status_code == 404
        assert len(cache.manager) == 0

    async def test_disabled_middleware(self, cache: ApiCache, calls: Dict[str, int]):
        app = FastAPI()
        app.add_middleware(ResponseCacheMiddleware, cache=cache, enabled=False)

        @app.get("/api/blog")
        async def blog():
            calls["blog"] = calls.get("blog", 0) + 1
            return {}

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            await client.get("/api/blog")
            await client.get("/api/blog")
        assert calls["blog"] == 2


def test_build_cache_key_sorts_query_and_encodes_vary():
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/blog",
        "query_string": b"page=2&category=ai",
        "headers": [(b"accept-encoding", b"gzip")],
    }
    key = build_cache_key(Request(scope), vary=("Accept-Encoding",))
    assert key.startswith("GET:/api/blog?category=ai&page=2&vary=")

    assert build_cache_key(Request({**scope, "query_string": b""})) == "GET:/api/blog"
