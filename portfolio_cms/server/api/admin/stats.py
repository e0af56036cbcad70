"""Admin dashboard statistics."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.models.io.common import ApiResponse
from portfolio_cms.core.models.io.operations import DashboardStats
from portfolio_cms.server.services.content import ContentService

router = APIRouter(tags=["admin-stats"])


@router.get(
    "",
    response_model=ApiResponse[DashboardStats],
    summary="Dashboard Statistics",
    description="Content counts, conversations in the window and recent activity. Cached for 30 minutes.",
)
async def dashboard_stats(
    days: int = Query(30, ge=1, le=365, description="Window for the conversation count"),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[DashboardStats]:
    analytics = await ContentService(session).get_analytics(days)
    return ApiResponse[DashboardStats](data=DashboardStats.model_validate(analytics))
