"""TOTP two-factor authentication helpers built on pyotp."""

from __future__ import annotations

import secrets
from typing import List, Optional, Tuple

import pyotp

from .passwords import hash_password, verify_password

ISSUER_NAME = "Portfolio CMS"
BACKUP_CODE_COUNT = 8
VALID_WINDOW = 1


def generate_secret() -> str:
    return pyotp.random_base32()


def provisioning_uri(secret: str, account_name: str, issuer_name: str = ISSUER_NAME) -> str:
    """``otpauth://`` URI to render as a QR code in an authenticator app."""
    return pyotp.TOTP(secret).provisioning_uri(name=account_name, issuer_name=issuer_name)


def verify_totp(secret: Optional[str], token: str) -> bool:
    """Verify a 6-digit code, accepting one step of clock drift either way."""
    if not secret or not token:
        return False
    token = token.strip().replace(" ", "")
    if not token.isdigit():
        return False
    return pyotp.TOTP(secret).verify(token, valid_window=VALID_WINDOW)


def generate_backup_codes(count: int = BACKUP_CODE_COUNT) -> Tuple[List[str], List[str]]:
    """Create one-time backup codes.

    Returns:
        ``(plain_codes, hashed_codes)``; only the hashes are stored.
    """
    codes = [secrets.token_hex(4).upper() for _ in range(count)]
    return codes, [hash_password(code) for code in codes]


def consume_backup_code(code: str, hashed_codes: List[str]) -> Optional[List[str]]:
    """Match ``code`` against the stored hashes.

    Returns:
        The remaining hashes when the code matched, otherwise ``None``.
    """
    normalized = code.strip().upper()
    for index, hashed in enumerate(hashed_codes):
        if verify_password(normalized, hashed):
            return hashed_codes[:index] + hashed_codes[index + 1 :]
    return None
