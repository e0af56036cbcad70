from typing import AsyncGenerator, Dict
from unittest.mock import patch

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database.entities.admin_users import AdminUser
from portfolio_cms.core.security.passwords import hash_password
from portfolio_cms.core.security.tokens import create_access_token

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from portfolio_cms.core.database import get_session
    from portfolio_cms.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("portfolio_cms.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_user(session: AsyncSession) -> AdminUser:
    user = AdminUser(email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD), name="Test Admin")
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_headers(admin_user: AdminUser) -> Dict[str, str]:
    token = create_access_token(admin_user.id, admin_user.email, admin_user.name)
    return {"Authorization": f"Bearer {token}"}
