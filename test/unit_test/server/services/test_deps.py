"""Unit tests for server services dependencies.

Tests verify that ``get_current_admin`` resolves the admin from the request
state or token, and that ``client_ip`` honours proxy headers.
"""

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from portfolio_cms.core.security.tokens import TokenPayload, create_access_token
from portfolio_cms.server.services.deps import client_ip, get_current_admin


def _request(headers=None, client=("10.0.0.5", 1234)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/admin/stats",
        "query_string": b"",
        "headers": [(name.lower().encode(), value.encode()) for name, value in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


class TestGetCurrentAdmin:
    def test_uses_middleware_state(self):
        request = _request()
        payload = TokenPayload(sub="user-1", email="admin@example.com", role="admin", exp=0, iat=0)
        request.state.admin = payload
        assert get_current_admin(request) is payload

    def test_falls_back_to_bearer_token(self):
        token = create_access_token("user-1", "admin@example.com")
        admin = get_current_admin(_request({"Authorization": f"Bearer {token}"}))
        assert admin.sub == "user-1"

    @pytest.mark.parametrize("headers", [None, {"Authorization": "Bearer garbage"}])
    def test_rejects_missing_or_invalid_token(self, headers):
        with pytest.raises(HTTPException) as exc_info:
            get_current_admin(_request(headers))
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["error"] == "NO_TOKEN"


class TestClientIp:
    def test_forwarded_for_first_hop(self):
        assert client_ip(_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})) == "203.0.113.7"

    def test_peer_address(self):
        assert client_ip(_request()) == "10.0.0.5"

    def test_unknown_client(self):
        assert client_ip(_request(client=None)) is None
