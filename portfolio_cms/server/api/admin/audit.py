"""
Admin audit log endpoints.

Listing, statistics, CSV/JSON export and retention cleanup of the audit trail.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.database.base import utc_now
from portfolio_cms.core.models.io.common import ApiResponse, PaginatedResponse, Pagination
from portfolio_cms.core.models.io.operations import AuditCleanupResult, AuditLogRead, AuditStats
from portfolio_cms.server.services.audit import AuditLogger, record_admin_action

router = APIRouter(tags=["admin-audit"])

EXPORT_MEDIA_TYPES = {"json": "application/json", "csv": "text/csv"}


def _filters(
    action: Optional[str],
    resource: Optional[str],
    user_id: Optional[str],
    success: Optional[bool],
    severity: Optional[List[str]],
    date_from: Optional[datetime],
    date_to: Optional[datetime],
) -> Dict[str, Any]:
    return {
        "action": action,
        "resource": resource,
        "user_id": user_id,
        "success": success,
        "severities": severity or None,
        "date_from": date_from,
        "date_to": date_to,
    }


@router.get(
    "",
    response_model=PaginatedResponse[AuditLogRead],
    summary="List Audit Events",
    description="Audit events newest first, filtered by action, resource, user, outcome, severity and date.",
)
async def list_events(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    action: Optional[str] = Query(None),
    resource: Optional[str] = Query(None),
    user_id: Optional[str] = Query(None),
    success: Optional[bool] = Query(None),
    severity: Optional[List[str]] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    session: AsyncSession = Depends(get_session),
) -> PaginatedResponse[AuditLogRead]:
    filters = _filters(action, resource, user_id, success, severity, date_from, date_to)
    entries, total = await AuditLogger(session).query(limit=limit, offset=(page - 1) * limit, **filters)
    return PaginatedResponse[AuditLogRead](
        data=[AuditLogRead.model_validate(entry) for entry in entries],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/stats", response_model=ApiResponse[AuditStats], summary="Audit Statistics")
async def audit_stats(
    days: int = Query(7, ge=1, le=365),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[AuditStats]:
    return ApiResponse[AuditStats](data=await AuditLogger(session).stats(days))


@router.get(
    "/export",
    summary="Export Audit Events",
    description="Download matching audit events as JSON or CSV.",
    response_class=Response,
)
async def export_events(
    format: Literal["json", "csv"] = Query("json"),
    action: Optional[str] = Query(None),
    resource: Optional[str] = Query(None),
    user_id: Optional[str] = Query(None),
    success: Optional[bool] = Query(None),
    severity: Optional[List[str]] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    session: AsyncSession = Depends(get_session),
) -> Response:
    filters = _filters(action, resource, user_id, success, severity, date_from, date_to)
    body = await AuditLogger(session).export(format, **filters)
    filename = f"audit-log-{utc_now().strftime('%Y%m%d-%H%M%S')}.{format}"
    return Response(
        content=body,
        media_type=EXPORT_MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/cleanup", response_model=ApiResponse[AuditCleanupResult], summary="Audit Retention Cleanup")
async def cleanup_events(
    request: Request,
    retention_days: int = Query(365, ge=1, le=3650),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[AuditCleanupResult]:
    """Delete audit events older than ``retention_days``."""
    deleted = await AuditLogger(session).cleanup(retention_days)
    await record_admin_action(
        session,
        request,
        "cleanup",
        "audit_log",
        details={"retention_days": retention_days, "deleted": deleted},
        severity="warning",
    )
    return ApiResponse[AuditCleanupResult](
        message=f"Deleted {deleted} audit events",
        data=AuditCleanupResult(retention_days=retention_days, deleted=deleted),
    )
