"""
Admin session tokens.

Signed JWTs carrying the admin identity. Tokens are issued on login, stored in
the ``admin-token`` cookie (or sent as a bearer token) and verified by the
admin auth middleware on every admin request.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel, ValidationError

from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.server.core.config import JWTConfig, settings

logger = get_logger(__name__)

ADMIN_ROLE = "admin"


class TokenPayload(BaseModel):
    """Verified claims of an admin token."""

    sub: str
    email: str
    name: Optional[str] = None
    role: str
    exp: int
    iat: int

    @property
    def user_id(self) -> str:
        return self.sub


def create_access_token(
    user_id: str,
    email: str,
    name: Optional[str] = None,
    role: str = ADMIN_ROLE,
    config: Optional[JWTConfig] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed admin token.

    Args:
        user_id: Admin user id, stored as ``sub``
        email: Admin email
        name: Display name
        role: Role claim, only ``admin`` is accepted on verification
        config: Token configuration, defaults to the application settings
        expires_delta: Lifetime override

    Returns:
        Encoded JWT string.
    """
    config = config or settings.jwt
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "name": name,
        "role": role,
        "iat": now,
        "exp": now + (expires_delta or timedelta(days=config.expire_days)),
        "iss": config.issuer,
        "aud": config.audience,
    }
    return jwt.encode(payload, config.secret, algorithm=config.algorithm)


def decode_access_token(token: str, config: Optional[JWTConfig] = None) -> Optional[TokenPayload]:
    """
    Decode and validate a token signature, expiry, issuer and audience.

    Returns ``None`` for expired, tampered or malformed tokens. The role is not checked.
    """
    config = config or settings.jwt
    try:
        claims = jwt.decode(
            token,
            config.secret,
            algorithms=[config.algorithm],
            audience=config.audience,
            issuer=config.issuer,
        )
        payload = TokenPayload.model_validate(claims)
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired admin token")
        return None
    except (jwt.InvalidTokenError, ValidationError) as e:
        logger.debug(f"Rejected invalid admin token: {e}")
        return None
    return payload


def verify_access_token(token: str, config: Optional[JWTConfig] = None) -> Optional[TokenPayload]:
    """Decode a token and require the ``admin`` role."""
    payload = decode_access_token(token, config)
    if payload is None:
        return None
    if payload.role != ADMIN_ROLE:
        logger.warning(f"Rejected token with role '{payload.role}' for {payload.email}")
        return None
    return payload


def refresh_access_token(token: str, config: Optional[JWTConfig] = None) -> Optional[str]:
    """Issue a fresh token for a still-valid one."""
    payload = verify_access_token(token, config)
    if payload is None:
        return None
    return create_access_token(payload.sub, payload.email, payload.name, payload.role, config)
