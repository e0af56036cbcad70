"""Tests for admin authentication and two-factor management."""

from __future__ import annotations

import pyotp
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database.entities import AdminUser
from portfolio_cms.core.security.passwords import hash_password, verify_password
from portfolio_cms.server.services.auth import AuthError, AuthService, create_default_admin

PASSWORD = "correct-horse-battery"


@pytest.fixture
async def user(session: AsyncSession) -> AdminUser:
    admin = AdminUser(email="admin@example.com", password_hash=hash_password(PASSWORD), name="Admin")
    session.add(admin)
    await session.commit()
    return admin


class TestAuthenticate:
    async def test_valid_credentials_stamp_last_login(self, session: AsyncSession, user: AdminUser):
        result = await AuthService(session).authenticate("ADMIN@example.com", PASSWORD)
        assert result.id == user.id
        assert result.last_login_at is not None

    @pytest.mark.parametrize("email, password", [("admin@example.com", "wrong"), ("nobody@example.com", PASSWORD)])
    async def test_invalid_credentials(self, session: AsyncSession, user: AdminUser, email: str, password: str):
        with pytest.raises(AuthError) as exc_info:
            await AuthService(session).authenticate(email, password)
        assert exc_info.value.code == "INVALID_CREDENTIALS"
        assert exc_info.value.status_code == 401

    async def test_inactive_user_cannot_log_in(self, session: AsyncSession, user: AdminUser):
        user.is_active = False
        await session.commit()
        with pytest.raises(AuthError):
            await AuthService(session).authenticate("admin@example.com", PASSWORD)


class TestPasswordChange:
    async def test_change_password(self, session: AsyncSession, user: AdminUser):
        await AuthService(session).change_password(user, PASSWORD, "new-password-123")
        assert verify_password("new-password-123", user.password_hash)

    async def test_wrong_current_password(self, session: AsyncSession, user: AdminUser):
        with pytest.raises(AuthError) as exc_info:
            await AuthService(session).change_password(user, "wrong", "new-password-123")
        assert exc_info.value.status_code == 400

    async def test_weak_new_password(self, session: AsyncSession, user: AdminUser):
        with pytest.raises(AuthError) as exc_info:
            await AuthService(session).change_password(user, PASSWORD, "short")
        assert exc_info.value.code == "WEAK_PASSWORD"


class TestTwoFactor:
    async def _enable(self, service: AuthService, user: AdminUser):
        setup = await service.setup_two_factor(user)
        await service.enable_two_factor(user, pyotp.TOTP(setup.secret).now())
        return setup

    async def test_setup_leaves_two_factor_pending(self, session: AsyncSession, user: AdminUser):
        service = AuthService(session)
        setup = await service.setup_two_factor(user)

        assert len(setup.backup_codes) == 8
        assert setup.provisioning_uri.startswith("otpauth://")
        status = service.two_factor_status(user)
        assert status.enabled is False
        assert status.pending_setup is True

    async def test_enable_requires_valid_code(self, session: AsyncSession, user: AdminUser):
        service = AuthService(session)
        await service.setup_two_factor(user)
        with pytest.raises(AuthError) as exc_info:
            await service.enable_two_factor(user, "abcdef")
        assert exc_info.value.code == "INVALID_OTP"

    async def test_enable_without_setup(self, session: AsyncSession, user: AdminUser):
        with pytest.raises(AuthError) as exc_info:
            await AuthService(session).enable_two_factor(user, "123456")
        assert exc_info.value.code == "TWO_FACTOR_NOT_SETUP"

    async def test_login_requires_code_once_enabled(self, session: AsyncSession, user: AdminUser):
        service = AuthService(session)
        setup = await self._enable(service, user)

        with pytest.raises(AuthError) as exc_info:
            await service.authenticate("admin@example.com", PASSWORD)
        assert exc_info.value.code == "TWO_FACTOR_REQUIRED"

        logged_in = await service.authenticate("admin@example.com", PASSWORD, pyotp.TOTP(setup.secret).now())
        assert logged_in.id == user.id

    async def test_backup_code_is_consumed(self, session: AsyncSession, user: AdminUser):
        service = AuthService(session)
        setup = await self._enable(service, user)
        code = setup.backup_codes[0]

        await service.authenticate("admin@example.com", PASSWORD, code)
        assert service.two_factor_status(user).backup_codes_remaining == 7

        with pytest.raises(AuthError) as exc_info:
            await service.authenticate("admin@example.com", PASSWORD, code)
        assert exc_info.value.code == "INVALID_OTP"

    async def test_disable_clears_secret(self, session: AsyncSession, user: AdminUser):
        service = AuthService(session)
        setup = await self._enable(service, user)

        await service.disable_two_factor(user, pyotp.TOTP(setup.secret).now())

        assert user.two_factor_enabled is False
        assert user.two_factor_secret is None
        assert user.get_backup_codes_list() == []

    async def test_setup_twice_when_enabled_is_rejected(self, session: AsyncSession, user: AdminUser):
        service = AuthService(session)
        await self._enable(service, user)
        with pytest.raises(AuthError) as exc_info:
            await service.setup_two_factor(user)
        assert exc_info.value.code == "TWO_FACTOR_ENABLED"


class TestDefaultAdmin:
    async def test_creates_once(self, session: AsyncSession):
        user, created = await create_default_admin(session, "Boss@Example.com", "long-enough-pw", "Boss")
        assert created is True
        assert user.email == "boss@example.com"

        again, created_again = await create_default_admin(session, "boss@example.com", "long-enough-pw")
        assert created_again is False
        assert again.id == user.id

    @pytest.mark.parametrize("email, password", [("not-an-email", "long-enough-pw"), ("a@example.com", "short")])
    async def test_rejects_unusable_credentials(self, session: AsyncSession, email: str, password: str):
        assert await create_default_admin(session, email, password) == (None, False)
