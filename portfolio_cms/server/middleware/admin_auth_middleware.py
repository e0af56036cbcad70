"""
Admin authentication middleware.

Gates the admin surface with the signed admin token:

- ``/api/admin/*`` (except the login and logout endpoints) answers 401 JSON
  when the token is missing or invalid.
- ``/admin/*`` pages (except ``/admin/login``) redirect to the login page.

A valid token is stored on ``request.state.admin`` and the admin identity is
echoed in ``X-User-Id``, ``X-User-Email`` and ``X-User-Role`` headers.
"""

from typing import Callable, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.security.tokens import ADMIN_ROLE, decode_access_token
from portfolio_cms.server.core.config import settings

logger = get_logger(__name__)

ADMIN_API_PREFIX = "/api/admin"
ADMIN_PAGE_PREFIX = "/admin"
LOGIN_PAGE = "/admin/login"
PUBLIC_ADMIN_PATHS = frozenset({"/api/admin/auth/login", "/api/admin/auth/logout", LOGIN_PAGE})


def extract_token(request: Request) -> Optional[str]:
    """Read the admin token from the auth cookie or an ``Authorization: Bearer`` header."""
    token = request.cookies.get(settings.auth_cookie_name)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def _is_under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


class AdminAuthMiddleware(BaseHTTPMiddleware):
    """Verify admin tokens for the admin API and admin pages."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        is_api = _is_under(path, ADMIN_API_PREFIX)
        is_page = not is_api and _is_under(path, ADMIN_PAGE_PREFIX)

        if request.method == "OPTIONS" or not (is_api or is_page) or path in PUBLIC_ADMIN_PATHS:
            return await call_next(request)

        token = extract_token(request)
        payload = decode_access_token(token) if token else None

        if payload is None:
            error = "NO_TOKEN" if token is None else "INVALID_TOKEN"
            logger.info(f"Rejected admin request {request.method} {path}: {error}")
            if is_api:
                message = "No authentication token found" if token is None else "Invalid or expired token"
                response = JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"success": False, "message": message, "error": error},
                )
            else:
                response = RedirectResponse(url=LOGIN_PAGE, status_code=status.HTTP_303_SEE_OTHER)
            if token is not None:
                response.delete_cookie(settings.auth_cookie_name, path="/")
            return response

        if payload.role != ADMIN_ROLE:
            logger.warning(f"Forbidden admin request {request.method} {path} by {payload.email} (role={payload.role})")
            if is_api:
                return JSONResponse(
                    status_code=status.HTTP_403_FORBIDDEN,
                    content={"success": False, "message": "Insufficient permissions", "error": "FORBIDDEN"},
                )
            return RedirectResponse(url=LOGIN_PAGE, status_code=status.HTTP_303_SEE_OTHER)

        request.state.admin = payload
        response = await call_next(request)
        response.headers["X-User-Id"] = payload.sub
        response.headers["X-User-Email"] = payload.email
        response.headers["X-User-Role"] = payload.role
        return response
