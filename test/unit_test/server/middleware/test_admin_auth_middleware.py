"""
Unit tests for the admin authentication middleware and request logging middleware.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from portfolio_cms.core.security.tokens import create_access_token
from portfolio_cms.server.middleware import AdminAuthMiddleware, RequestLoggingMiddleware


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(AdminAuthMiddleware)

    @app.get("/api/admin/stats")
    async def stats(request: Request):
        return {"admin": request.state.admin.email}

    @app.post("/api/admin/auth/login")
    async def login():
        return {"ok": True}

    @app.get("/admin")
    async def dashboard():
        return {"page": "dashboard"}

    @app.get("/admin/login")
    async def login_page():
        return {"page": "login"}

    @app.get("/api/blog")
    async def public():
        return {"public": True}

    @app.get("/administrator")
    async def lookalike():
        return {"public": True}

    return app


@pytest.fixture
async def http(app: FastAPI):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestAdminApi:
    async def test_missing_token(self, http: AsyncClient):
        response = await http.get("/api/admin/stats")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "No authentication token found",
            "error": "NO_TOKEN",
        }

    async def test_invalid_token(self, http: AsyncClient):
        response = await http.get("/api/admin/stats", headers=_bearer("not-a-token"))

        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_TOKEN"
        assert response.json()["message"] == "Invalid or expired token"

    async def test_expired_token(self, http: AsyncClient):
        token = create_access_token("user-1", "admin@example.com", expires_delta=timedelta(seconds=-5))
        response = await http.get("/api/admin/stats", headers=_bearer(token))
        assert response.json()["error"] == "INVALID_TOKEN"

    async def test_non_admin_role_is_forbidden(self, http: AsyncClient):
        token = create_access_token("user-1", "editor@example.com", role="editor")
        response = await http.get("/api/admin/stats", headers=_bearer(token))

        assert response.status_code == 403
        assert response.json()["error"] == "FORBIDDEN"

    async def test_valid_bearer_token(self, http: AsyncClient):
        token = create_access_token("user-1", "admin@example.com", "Admin")
        response = await http.get("/api/admin/stats", headers=_bearer(token))

        assert response.status_code == 200
        assert response.json() == {"admin": "admin@example.com"}
        assert response.headers["X-User-Id"] == "user-1"
        assert response.headers["X-User-Email"] == "admin@example.com"
        assert response.headers["X-User-Role"] == "admin"

    async def test_valid_cookie(self, http: AsyncClient):
        token = create_access_token("user-1", "admin@example.com")
        http.cookies.set("admin-token", token)
        response = await http.get("/api/admin/stats")
        assert response.status_code == 200

    async def test_login_is_public(self, http: AsyncClient):
        response = await http.post("/api/admin/auth/login")
        assert response.status_code == 200


class TestAdminPages:
    async def test_redirects_to_login(self, http: AsyncClient):
        response = await http.get("/admin")
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login"

    async def test_login_page_is_public(self, http: AsyncClient):
        response = await http.get("/admin/login")
        assert response.status_code == 200

    async def test_authenticated_page(self, http: AsyncClient):
        token = create_access_token("user-1", "admin@example.com")
        response = await http.get("/admin", headers=_bearer(token))
        assert response.json() == {"page": "dashboard"}


class TestPublicPaths:
    @pytest.mark.parametrize("path", ["/api/blog", "/administrator"])
    async def test_untouched(self, http: AsyncClient, path: str):
        response = await http.get(path)
        assert response.status_code == 200
        assert "X-User-Id" not in response.headers


class TestRequestLoggingMiddleware:
    async def test_adds_timing_and_request_id(self):
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        with patch("portfolio_cms.server.middleware.request_logging_middleware.log_api_request") as mock_log:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
                response = await client.get("/ping", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert float(response.headers["X-Process-Time"]) >= 0
        mock_log.assert_called_once()
        assert mock_log.call_args.kwargs["path"] == "/ping"
        assert mock_log.call_args.kwargs["status_code"] == 200

    async def test_logs_failures(self):
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/boom")
        async def boom():
            raise RuntimeError("boom")

        with (
            patch("portfolio_cms.server.middleware.request_logging_middleware.log_api_request") as mock_log,
            patch("portfolio_cms.server.middleware.request_logging_middleware.logger") as mock_logger,
        ):
            async with AsyncClient(
                transport=ASGITransport(app=app, raise_app_exceptions=False), base_url="http://localhost"
            ) as client:
                response = await client.get("/boom")

        assert response.status_code == 500
        mock_logger.error.assert_called_once()
        assert mock_log.call_args.kwargs["status_code"] == 500
