"""Key/value site settings repository."""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.site import SiteSetting
from .base import SqlRepository


class SiteSettingRepository(SqlRepository[SiteSetting]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SiteSetting)

    async def get_by_key(self, key: str) -> Optional[SiteSetting]:
        result = await self.session.execute(select(SiteSetting).where(SiteSetting.key == key))
        return result.scalars().first()

    async def get_value(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the stored JSON object for ``key`` or None when unset."""
        setting = await self.get_by_key(key)
        return setting.get_value() if setting else None

    async def set_value(self, key: str, value: Dict[str, Any]) -> SiteSetting:
        """Insert or replace the JSON object stored under ``key``."""
        setting = await self.get_by_key(key)
        if setting is None:
            setting = SiteSetting(key=key)
            setting.set_value(value)
            return await self.create(setting)
        setting.set_value(value)
        return await self.update(setting)
