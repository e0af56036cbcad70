"""
Admin backup endpoints.

Backups are JSON snapshots of every table stored in ``BACKUP_DIR``. Restoring
replaces table contents and is audited as a critical event.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.cache.invalidation import invalidate_all_content
from portfolio_cms.core.database import get_session
from portfolio_cms.core.models.io.common import ApiResponse, MessageResponse
from portfolio_cms.core.models.io.operations import (
    BackupCreateRequest,
    BackupInfo,
    BackupRestoreRequest,
    BackupRestoreResult,
    BackupStatistics,
    BackupVerifyResult,
)
from portfolio_cms.server.services.audit import record_admin_action
from portfolio_cms.server.services.backup import BackupError, BackupNotFoundError, BackupService

router = APIRouter(tags=["admin-backup"])


def _http_error(e: BackupError) -> HTTPException:
    if isinstance(e, BackupNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post(
    "",
    response_model=ApiResponse[BackupInfo],
    status_code=status.HTTP_201_CREATED,
    summary="Create Backup",
    description="Snapshot every table to a JSON file with a SHA-256 checksum manifest.",
)
async def create_backup(
    request: Request,
    payload: Optional[BackupCreateRequest] = None,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[BackupInfo]:
    """
    Create a backup.

    - **type**: ``manual``, ``scheduled`` or ``pre-restore``.
    - **compress**: Store gzip-compressed JSON.
    - **description**: Optional note.
    """
    payload = payload or BackupCreateRequest()
    info = await BackupService(session).create_backup(payload.type, payload.compress, payload.description)
    await record_admin_action(session, request, "create", "backup", info.id, details={"size": info.size})
    return ApiResponse[BackupInfo](message="Backup created successfully", data=info)


@router.get("", response_model=ApiResponse[List[BackupInfo]], summary="List Backups")
async def list_backups(
    limit: int = Query(50, ge=1, le=500),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[List[BackupInfo]]:
    return ApiResponse[List[BackupInfo]](data=BackupService(session).list_backups(limit))


@router.get("/stats", response_model=ApiResponse[BackupStatistics], summary="Backup Statistics")
async def backup_statistics(session: AsyncSession = Depends(get_session)) -> ApiResponse[BackupStatistics]:
    return ApiResponse[BackupStatistics](data=BackupService(session).statistics())


@router.get(
    "/{backup_id}",
    response_model=ApiResponse[BackupInfo],
    summary="Get Backup",
    responses={404: {"description": "Backup not found"}},
)
async def get_backup(backup_id: str, session: AsyncSession = Depends(get_session)) -> ApiResponse[BackupInfo]:
    try:
        info = BackupService(session).get_backup(backup_id)
    except BackupError as e:
        raise _http_error(e) from e
    return ApiResponse[BackupInfo](data=info)


@router.post(
    "/{backup_id}/verify",
    response_model=ApiResponse[BackupVerifyResult],
    summary="Verify Backup",
    responses={404: {"description": "Backup not found"}},
)
async def verify_backup(backup_id: str, session: AsyncSession = Depends(get_session)) -> ApiResponse[BackupVerifyResult]:
    try:
        result = BackupService(session).verify_backup(backup_id)
    except BackupError as e:
        raise _http_error(e) from e
    return ApiResponse[BackupVerifyResult](data=result)


@router.post(
    "/{backup_id}/restore",
    response_model=ApiResponse[BackupRestoreResult],
    summary="Restore Backup",
    description="Replace the rows of all (or the selected) tables with the backup contents.",
    responses={
        400: {"description": "Backup failed verification or unknown tables"},
        404: {"description": "Backup not found"},
    },
)
async def restore_backup(
    request: Request,
    backup_id: str,
    payload: Optional[BackupRestoreRequest] = None,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[BackupRestoreResult]:
    tables = payload.tables if payload else None
    try:
        result = await BackupService(session).restore_backup(backup_id, tables)
    except BackupError as e:
        raise _http_error(e) from e

    invalidate_all_content()
    await record_admin_action(
        session, request, "restore", "backup", backup_id, details={"tables": result.tables}, severity="critical"
    )
    return ApiResponse[BackupRestoreResult](message="Backup restored successfully", data=result)


@router.delete(
    "/{backup_id}",
    response_model=MessageResponse,
    summary="Delete Backup",
    responses={404: {"description": "Backup not found"}},
)
async def delete_backup(request: Request, backup_id: str, session: AsyncSession = Depends(get_session)) -> MessageResponse:
    try:
        BackupService(session).delete_backup(backup_id)
    except BackupError as e:
        raise _http_error(e) from e
    await record_admin_action(session, request, "delete", "backup", backup_id, severity="warning")
    return MessageResponse(message="Backup deleted successfully")
