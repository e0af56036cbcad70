"""
Unit tests for FastAPI application lifespan management.

Tests verify that startup creates the tables and the default admin account,
and that startup failures are logged instead of stopping the server.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI

from portfolio_cms.server.main import lifespan

pytestmark = pytest.mark.asyncio


def _session_factory():
    session = MagicMock()
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=session)
    context.__aexit__ = AsyncMock(return_value=None)
    return MagicMock(return_value=context), session


class TestLifespanStartup:
    """Test application startup lifespan events."""

    async def test_startup_initializes_database(self, monkeypatch):
        monkeypatch.setattr("portfolio_cms.server.main.settings.admin_email", None)
        with patch("portfolio_cms.server.main.init_db", new_callable=AsyncMock) as mock_init_db:
            async with lifespan(FastAPI()):
                mock_init_db.assert_awaited_once()

    async def test_startup_creates_default_admin(self, monkeypatch):
        monkeypatch.setattr("portfolio_cms.server.main.settings.admin_email", "boss@example.com")
        monkeypatch.setattr("portfolio_cms.server.main.settings.admin_password", "long-enough-pw")
        factory, session = _session_factory()

        with (
            patch("portfolio_cms.server.main.init_db", new_callable=AsyncMock),
            patch("portfolio_cms.server.main.async_session_maker", factory),
            patch("portfolio_cms.server.main.create_default_admin", new_callable=AsyncMock) as mock_create,
        ):
            async with lifespan(FastAPI()):
                pass

        mock_create.assert_awaited_once()
        args = mock_create.await_args.args
        assert args[0] is session
        assert args[1:3] == ("boss@example.com", "long-enough-pw")

    async def test_startup_skips_admin_without_credentials(self, monkeypatch):
        monkeypatch.setattr("portfolio_cms.server.main.settings.admin_email", None)
        with (
            patch("portfolio_cms.server.main.init_db", new_callable=AsyncMock),
            patch("portfolio_cms.server.main.create_default_admin", new_callable=AsyncMock) as mock_create,
        ):
            async with lifespan(FastAPI()):
                pass
        mock_create.assert_not_awaited()

    async def test_startup_failure_is_logged(self):
        with (
            patch("portfolio_cms.server.main.init_db", new_callable=AsyncMock, side_effect=RuntimeError("db down")),
            patch("portfolio_cms.server.main.logger") as mock_logger,
        ):
            async with lifespan(FastAPI()):
                pass

        mock_logger.error.assert_called_once()
        assert "db down" in mock_logger.error.call_args[0][0]
