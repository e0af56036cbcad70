"""Audit log repository."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.audit_logs import AuditLog
from .base import QueryBuilder, SqlRepository


class AuditLogRepository(SqlRepository[AuditLog]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AuditLog)

    def _filtered(
        self,
        action: Optional[str] = None,
        resource: Optional[str] = None,
        user_id: Optional[str] = None,
        success: Optional[bool] = None,
        severities: Optional[Sequence[str]] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ):
        stmt = QueryBuilder.apply_filters(
            select(AuditLog),
            AuditLog,
            {"action": action, "resource": resource, "user_id": user_id, "success": success},
        )
        if severities:
            stmt = stmt.where(AuditLog.severity.in_(list(severities)))
        if date_from is not None:
            stmt = stmt.where(AuditLog.created_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(AuditLog.created_at <= date_to)
        return stmt

    async def query(
        self, limit: int = 100, offset: int = 0, **filters
    ) -> Tuple[List[AuditLog], int]:
        """Filtered audit entries, newest first, with the total match count."""
        stmt = self._filtered(**filters)
        total = await self.count_statement(stmt)
        stmt = QueryBuilder.apply_pagination(stmt.order_by(AuditLog.created_at.desc()), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def count_by(self, column, since: datetime) -> dict:
        stmt = (
            select(column, func.count())
            .where(AuditLog.created_at >= since)
            .group_by(column)
        )
        result = await self.session.execute(stmt)
        return {str(key): int(count) for key, count in result.all()}

    async def delete_older_than(self, cutoff: datetime) -> int:
        result = await self.session.execute(delete(AuditLog).where(AuditLog.created_at < cutoff))
        await self.session.commit()
        return int(result.rowcount or 0)
