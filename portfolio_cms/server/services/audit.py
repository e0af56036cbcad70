"""
Audit logging service.

Persists security-relevant events (logins, content changes, backups, 2FA
changes) to the ``audit_logs`` table and mirrors them to the application log.
Also provides querying, statistics, CSV/JSON export and retention cleanup for
the admin audit endpoints.
"""

import csv
import io
import json
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database.base import dump_json, utc_now
from portfolio_cms.core.database.entities.audit_logs import AuditLog
from portfolio_cms.core.database.repositories.audit_logs import AuditLogRepository
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.operations import AuditLogRead, AuditStats
from portfolio_cms.core.security.tokens import TokenPayload

from .deps import client_ip

logger = get_logger(__name__)

SEVERITIES = ("info", "warning", "critical")
EXPORT_COLUMNS = (
    "id",
    "created_at",
    "action",
    "resource",
    "resource_id",
    "user_id",
    "user_email",
    "success",
    "severity",
    "ip_address",
    "details",
)


class AuditLogger:
    """Write and query audit log entries."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repo = AuditLogRepository(session)

    async def log_event(
        self,
        action: str,
        resource: str,
        resource_id: Optional[str] = None,
        actor: Optional[TokenPayload] = None,
        user_email: Optional[str] = None,
        success: bool = True,
        severity: str = "info",
        details: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """
        Persist one audit event.

        Args:
            action: What happened, e.g. ``create``, ``login_failed``
            resource: Affected resource type, e.g. ``blog_post``
            resource_id: Affected row id
            actor: Authenticated admin performing the action
            user_email: Email for events without an authenticated actor (failed logins)
            success: Whether the action succeeded
            severity: ``info``, ``warning`` or ``critical``
            details: Extra JSON-serialisable context
            ip_address: Client address
        """
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown audit severity '{severity}'")

        entry = AuditLog(
            action=action,
            resource=resource,
            resource_id=resource_id,
            user_id=actor.sub if actor else None,
            user_email=actor.email if actor else user_email,
            success=success,
            severity=severity,
            details=dump_json(details or {}),
            ip_address=ip_address,
        )
        entry = await self.repo.create(entry)

        log = logger.warning if severity != "info" or not success else logger.info
        log(f"AUDIT {action} {resource}{'/' + resource_id if resource_id else ''} by {entry.user_email or 'anonymous'}")
        return entry

    async def query(
        self,
        limit: int = 100,
        offset: int = 0,
        action: Optional[str] = None,
        resource: Optional[str] = None,
        user_id: Optional[str] = None,
        success: Optional[bool] = None,
        severities: Optional[Sequence[str]] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> Tuple[List[AuditLog], int]:
        return await self.repo.query(
            limit=limit,
            offset=offset,
            action=action,
            resource=resource,
            user_id=user_id,
            success=success,
            severities=severities,
            date_from=date_from,
            date_to=date_to,
        )

    async def stats(self, days: int = 7) -> AuditStats:
        since = utc_now() - timedelta(days=days)
        by_action = await self.repo.count_by(AuditLog.action, since)
        by_severity = await self.repo.count_by(AuditLog.severity, since)
        by_resource = await self.repo.count_by(AuditLog.resource, since)
        by_success = await self.repo.count_by(AuditLog.success, since)
        failed = sum(count for key, count in by_success.items() if key in ("False", "0"))
        return AuditStats(
            days=days,
            total_events=sum(by_action.values()),
            failed_events=failed,
            by_action=by_action,
            by_severity=by_severity,
            by_resource=by_resource,
        )

    async def export(self, fmt: str = "json", **filters: Any) -> str:
        """Export matching entries (up to 10000) as a JSON array or CSV document."""
        entries, _ = await self.query(limit=10000, **filters)
        rows = [AuditLogRead.model_validate(entry).model_dump(mode="json") for entry in entries]
        if fmt == "json":
            return json.dumps(rows, indent=2)
        if fmt != "csv":
            raise ValueError(f"Unsupported export format '{fmt}'")

        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS)
        writer.writeheader()
        for row in rows:
            row["details"] = json.dumps(row["details"])
            writer.writerow({column: row.get(column) for column in EXPORT_COLUMNS})
        return buffer.getvalue()

    async def cleanup(self, retention_days: int = 365) -> int:
        """Delete entries older than ``retention_days``."""
        deleted = await self.repo.delete_older_than(utc_now() - timedelta(days=retention_days))
        logger.info(f"Audit cleanup removed {deleted} entries older than {retention_days} days")
        return deleted


async def record_admin_action(
    session: AsyncSession,
    request: Request,
    action: str,
    resource: str,
    resource_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    severity: str = "info",
) -> AuditLog:
    """Audit an action performed by the admin authenticated on ``request``."""
    return await AuditLogger(session).log_event(
        action=action,
        resource=resource,
        resource_id=resource_id,
        actor=getattr(request.state, "admin", None),
        severity=severity,
        details=details,
        ip_address=client_ip(request),
    )
