"""
Health Check Endpoints.

This module provides basic system status endpoints (health, detailed health,
version) used for monitoring and deployment verification.
"""

import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.cache.cache_manager import cache_manager
from portfolio_cms.core.database import get_session
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.server.core import constant
from portfolio_cms.server.core.config import settings

logger = get_logger(__name__)

router = APIRouter()

_STARTED_AT = time.monotonic()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {"success": True, "data": {"status": "ok"}}


@router.get(
    "/health/detailed",
    summary="Detailed Health Check",
    description="Check database connectivity and cache state in addition to liveness.",
    response_description="Component status object.",
)
async def detailed_health_check(session: AsyncSession = Depends(get_session)):
    """
    Detailed health check.

    Runs a trivial query against the database and reports cache statistics and
    process uptime. The overall status is ``degraded`` when the database is unreachable.
    """
    database = {"status": "ok"}
    start = time.perf_counter()
    try:
        await session.execute(text("SELECT 1"))
        database["latency_ms"] = round((time.perf_counter() - start) * 1000, 2)
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        database = {"status": "error", "error": str(e)}

    stats = cache_manager.get_stats()
    return {
        "success": True,
        "data": {
            "status": "ok" if database["status"] == "ok" else "degraded",
            "version": constant.VERSION,
            "environment": settings.environment,
            "uptime_seconds": round(time.monotonic() - _STARTED_AT, 1),
            "database": database,
            "cache": {"items": stats.memory_items, "hit_rate": stats.hit_rate, "max_items": stats.max_items},
        },
    }


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    """
    Get API version.

    Returns the current semantic version of the application.
    """
    return {"success": True, "data": {"name": constant.PROJECT_NAME, "version": constant.VERSION}}
