"""Admin user repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.admin_users import AdminUser
from .base import SqlRepository


class AdminUserRepository(SqlRepository[AdminUser]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AdminUser)

    async def get_by_email(self, email: str) -> Optional[AdminUser]:
        """Look up an admin by email, case-insensitively (emails are stored lower-cased)."""
        stmt = select(AdminUser).where(AdminUser.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()
