"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables and that the
grouped configuration views are derived from it.
"""

import pytest

from portfolio_cms.server.core.config import CacheSettings, CORSConfig, JWTConfig, Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "DATABASE_URL",
        "JWT_SECRET",
        "JWT_EXPIRE_DAYS",
        "CACHE_ENABLED",
        "CACHE_DEFAULT_TTL",
        "CACHE_MAX_ITEMS",
        "RATE_LIMIT_ENABLED",
        "SITE_NAME",
        "UPLOAD_DIR",
        "BACKUP_DIR",
        "OPENAI_BASE_URL",
        "SITE_BASE_URL",
        "LOGFIRE_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsDefaults:
    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./portfolio.db"
        assert settings.cache_default_ttl == 3600
        assert settings.cache_max_items == 1000
        assert settings.rate_limit_enabled is True
        assert settings.login_rate_limit == "5/minute"
        assert settings.upload_max_bytes == 5 * 1024 * 1024
        assert settings.logfire_enabled is False


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    @pytest.mark.parametrize(
        "env_name, attribute, raw, expected",
        [
            ("DATABASE_URL", "database_url", "postgresql://u:p@db/portfolio", "postgresql://u:p@db/portfolio"),
            ("CACHE_DEFAULT_TTL", "cache_default_ttl", "120", 120),
            ("CACHE_ENABLED", "cache_enabled", "false", False),
            ("RATE_LIMIT_ENABLED", "rate_limit_enabled", "0", False),
            ("SITE_NAME", "site_name", "My Portfolio", "My Portfolio"),
            ("JWT_EXPIRE_DAYS", "jwt_expire_days", "1", 1),
            ("SLOW_QUERY_THRESHOLD_MS", "slow_query_threshold_ms", "250", 250.0),
        ],
    )
    def test_binding(self, clean_env, env_name, attribute, raw, expected):
        clean_env.setenv(env_name, raw)
        assert getattr(Settings(_env_file=None), attribute) == expected


class TestGroupedConfig:
    def test_jwt_view(self, clean_env):
        clean_env.setenv("JWT_SECRET", "s" * 40)
        clean_env.setenv("JWT_EXPIRE_DAYS", "2")

        jwt = Settings(_env_file=None).jwt

        assert isinstance(jwt, JWTConfig)
        assert jwt.secret == "s" * 40
        assert jwt.expire_days == 2
        assert jwt.cookie_name == "admin-token"

    def test_cache_view(self, clean_env):
        clean_env.setenv("CACHE_MAX_ITEMS", "50")

        cache = Settings(_env_file=None).cache

        assert isinstance(cache, CacheSettings)
        assert cache.max_items == 50
        assert cache.default_ttl == 3600

    def test_cors_view(self, clean_env):
        cors = Settings(_env_file=None).cors
        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["*"]
