"""
Admin authentication service.

Credential checks, password changes, TOTP two-factor management and creation
of the default administrator account at startup.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database.base import utc_now
from portfolio_cms.core.database.entities.admin_users import AdminUser
from portfolio_cms.core.database.repositories import AdminUserRepository
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.operations import TwoFactorSetupResponse, TwoFactorStatus
from portfolio_cms.core.security import two_factor
from portfolio_cms.core.security.passwords import MIN_PASSWORD_LENGTH, hash_password, verify_password

logger = get_logger(__name__)


class AuthError(Exception):
    """Authentication failure carrying an error code and HTTP status."""

    def __init__(self, message: str, code: str, status_code: int = status.HTTP_401_UNAUTHORIZED) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class AuthService:
    """Operations on admin accounts."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = AdminUserRepository(session)

    async def authenticate(self, email: str, password: str, otp: Optional[str] = None) -> AdminUser:
        """
        Check credentials and, when enabled, the second factor.

        Args:
            email: Login email (case-insensitive)
            password: Plain password
            otp: TOTP or backup code, required when 2FA is enabled

        Returns:
            The authenticated admin with ``last_login_at`` updated.

        Raises:
            AuthError: ``INVALID_CREDENTIALS``, ``TWO_FACTOR_REQUIRED`` or ``INVALID_OTP``.
        """
        user = await self.users.get_by_email(email)
        if user is None or not user.is_active or not verify_password(password, user.password_hash):
            raise AuthError("Invalid email or password", "INVALID_CREDENTIALS")

        if user.two_factor_enabled:
            if not otp:
                raise AuthError("Two-factor authentication code required", "TWO_FACTOR_REQUIRED")
            if not await self._check_second_factor(user, otp):
                raise AuthError("Invalid two-factor authentication code", "INVALID_OTP")

        user.last_login_at = utc_now()
        return await self.users.update(user)

    async def get_user(self, user_id: str) -> Optional[AdminUser]:
        user = await self.users.get_by_id(user_id)
        return user if user is not None and user.is_active else None

    async def change_password(self, user: AdminUser, current_password: str, new_password: str) -> AdminUser:
        if not verify_password(current_password, user.password_hash):
            raise AuthError("Current password is incorrect", "INVALID_CREDENTIALS", status.HTTP_400_BAD_REQUEST)
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise AuthError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                "WEAK_PASSWORD",
                status.HTTP_400_BAD_REQUEST,
            )
        user.password_hash = hash_password(new_password)
        logger.info(f"Password changed for {user.email}")
        return await self.users.update(user)

    # ------------------------------------------------------------------
    # Two-factor authentication
    # ------------------------------------------------------------------

    def two_factor_status(self, user: AdminUser) -> TwoFactorStatus:
        return TwoFactorStatus(
            enabled=user.two_factor_enabled,
            pending_setup=bool(user.two_factor_secret) and not user.two_factor_enabled,
            backup_codes_remaining=len(user.get_backup_codes_list()),
        )

    async def setup_two_factor(self, user: AdminUser) -> TwoFactorSetupResponse:
        """Generate a pending secret and fresh backup codes; 2FA stays off until enabled."""
        if user.two_factor_enabled:
            raise AuthError(
                "Two-factor authentication is already enabled", "TWO_FACTOR_ENABLED", status.HTTP_400_BAD_REQUEST
            )
        secret = two_factor.generate_secret()
        codes, hashes = two_factor.generate_backup_codes()
        user.two_factor_secret = secret
        user.set_backup_codes_list(hashes)
        await self.users.update(user)
        return TwoFactorSetupResponse(
            secret=secret,
            provisioning_uri=two_factor.provisioning_uri(secret, user.email),
            backup_codes=codes,
        )

    async def enable_two_factor(self, user: AdminUser, token: str) -> AdminUser:
        """Activate 2FA after the first code from the authenticator app checks out."""
        if not user.two_factor_secret:
            raise AuthError("Two-factor setup has not been started", "TWO_FACTOR_NOT_SETUP", status.HTTP_400_BAD_REQUEST)
        if not two_factor.verify_totp(user.two_factor_secret, token):
            raise AuthError("Invalid two-factor authentication code", "INVALID_OTP", status.HTTP_400_BAD_REQUEST)
        user.two_factor_enabled = True
        logger.info(f"Two-factor authentication enabled for {user.email}")
        return await self.users.update(user)

    async def verify_second_factor(self, user: AdminUser, token: str) -> bool:
        if not user.two_factor_enabled:
            raise AuthError(
                "Two-factor authentication is not enabled", "TWO_FACTOR_DISABLED", status.HTTP_400_BAD_REQUEST
            )
        return await self._check_second_factor(user, token)

    async def disable_two_factor(self, user: AdminUser, token: str) -> AdminUser:
        if not await self.verify_second_factor(user, token):
            raise AuthError("Invalid two-factor authentication code", "INVALID_OTP", status.HTTP_400_BAD_REQUEST)
        user.two_factor_enabled = False
        user.two_factor_secret = None
        user.set_backup_codes_list([])
        logger.info(f"Two-factor authentication disabled for {user.email}")
        return await self.users.update(user)

    async def _check_second_factor(self, user: AdminUser, token: str) -> bool:
        """Accept a TOTP code, or consume one backup code."""
        if two_factor.verify_totp(user.two_factor_secret, token):
            return True
        remaining = two_factor.consume_backup_code(token, user.get_backup_codes_list())
        if remaining is None:
            return False
        user.set_backup_codes_list(remaining)
        await self.users.update(user)
        logger.warning(f"Backup code used by {user.email}, {len(remaining)} remaining")
        return True


def validate_admin_credentials(email: str, password: str) -> List[str]:
    """Problems with a default-admin email/password pair; empty when usable."""
    problems = []
    if "@" not in email:
        problems.append("ADMIN_EMAIL must be a valid email address")
    if len(password) < MIN_PASSWORD_LENGTH:
        problems.append(f"ADMIN_PASSWORD must be at least {MIN_PASSWORD_LENGTH} characters")
    return problems


async def create_default_admin(
    session: AsyncSession, email: str, password: str, name: Optional[str] = None
) -> Tuple[Optional[AdminUser], bool]:
    """
    Ensure an admin account exists for ``email``.

    Returns:
        ``(user, created)``; ``(None, False)`` when the credentials are unusable.
    """
    problems = validate_admin_credentials(email, password)
    if problems:
        for problem in problems:
            logger.error(problem)
        return None, False

    repo = AdminUserRepository(session)
    existing = await repo.get_by_email(email)
    if existing is not None:
        logger.info(f"Admin user {existing.email} already exists")
        return existing, False

    user = await repo.create(
        AdminUser(email=email.strip().lower(), password_hash=hash_password(password), name=name or "Admin")
    )
    logger.info(f"Created default admin user {user.email}")
    return user, True
