from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable

import httpx
import pytest

# Settings are read at import time, so the test environment is fixed before
# anything from portfolio_cms is imported.
TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="portfolio-cms-test-"))

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "unit-test-secret-key-0123456789abcdef"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOGFIRE_ENABLED"] = "false"
os.environ["ENABLE_FILE_LOGGING"] = "false"
os.environ["CACHE_ENABLED"] = "true"
os.environ["UPLOAD_DIR"] = str(TEST_DATA_DIR / "uploads")
os.environ["BACKUP_DIR"] = str(TEST_DATA_DIR / "backups")
os.environ["OPENAI_BASE_URL"] = "http://mock-llm/v1"
os.environ["SITE_BASE_URL"] = "http://localhost:8000"
os.environ["SITE_NAME"] = "Test Portfolio"
os.environ.pop("NEWSLETTER_SUBSCRIBE_URL", None)
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)


@pytest.fixture(autouse=True)
def _reset_caches():
    """Every test starts with an empty cache and fresh query statistics."""
    from portfolio_cms.core.cache import api_cache, query_optimizer

    api_cache.reset()
    query_optimizer.reset_stats()
    yield
    api_cache.reset()
    query_optimizer.reset_stats()


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://testserver",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)
