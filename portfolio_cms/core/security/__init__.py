"""Password hashing, admin tokens and two-factor authentication."""

from .passwords import MIN_PASSWORD_LENGTH, hash_password, verify_password
from .tokens import ADMIN_ROLE, TokenPayload, create_access_token, refresh_access_token, verify_access_token

__all__ = [
    "ADMIN_ROLE",
    "MIN_PASSWORD_LENGTH",
    "TokenPayload",
    "create_access_token",
    "hash_password",
    "refresh_access_token",
    "verify_access_token",
    "verify_password",
]
