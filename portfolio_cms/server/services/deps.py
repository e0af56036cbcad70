"""
Shared route dependencies.

Provides the authenticated admin and the client address to API endpoints.
"""

from typing import Optional

from fastapi import HTTPException, Request, status

from portfolio_cms.core.security.tokens import TokenPayload, verify_access_token
from portfolio_cms.server.middleware.admin_auth_middleware import extract_token


def get_current_admin(request: Request) -> TokenPayload:
    """
    Return the admin authenticated by the auth middleware.

    Falls back to verifying the request token directly so admin routes stay
    protected even when mounted without the middleware.

    Raises:
        HTTPException: 401 when no valid admin token is present.
    """
    payload: Optional[TokenPayload] = getattr(request.state, "admin", None)
    if payload is None:
        token = extract_token(request)
        payload = verify_access_token(token) if token else None
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Authentication required", "error": "NO_TOKEN"},
        )
    return payload


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
