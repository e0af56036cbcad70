"""Admin cache management endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.cache import api_cache, cache_manager, query_optimizer
from portfolio_cms.core.database import get_session
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.common import ApiResponse
from portfolio_cms.core.models.io.operations import CacheInvalidateRequest, CacheOverview
from portfolio_cms.server.services.audit import record_admin_action

logger = get_logger(__name__)

router = APIRouter(tags=["admin-cache"])


@router.get(
    "/stats",
    response_model=ApiResponse[CacheOverview],
    summary="Cache Statistics",
    description="Cache state and metrics, entries per tag and query timing statistics.",
)
async def cache_stats() -> ApiResponse[CacheOverview]:
    tags = api_cache.get_stats().tags
    overview = CacheOverview(
        cache=asdict(cache_manager.get_stats()),
        tags=tags,
        queries=asdict(query_optimizer.get_query_stats()),
    )
    return ApiResponse[CacheOverview](data=overview)


@router.post("/clear", response_model=ApiResponse[Dict[str, Any]], summary="Clear Cache")
async def clear_cache(request: Request, session: AsyncSession = Depends(get_session)) -> ApiResponse[Dict[str, Any]]:
    """Drop every cached entry and reset the query statistics."""
    removed = len(cache_manager)
    api_cache.reset()
    query_optimizer.reset_stats()
    await record_admin_action(session, request, "clear", "cache", details={"removed": removed})
    return ApiResponse[Dict[str, Any]](message="Cache cleared", data={"removed": removed})


@router.post(
    "/invalidate",
    response_model=ApiResponse[Dict[str, Any]],
    summary="Invalidate Cache Entries",
    description="Remove entries by tag and/or by key glob pattern (e.g. ``GET:/api/blog*``).",
    responses={400: {"description": "Neither tag nor pattern given"}},
)
async def invalidate_cache(
    request: Request,
    payload: CacheInvalidateRequest,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[Dict[str, Any]]:
    removed = 0
    if payload.tag:
        removed += api_cache.invalidate_by_tag(payload.tag)
    if payload.pattern:
        removed += api_cache.invalidate_by_pattern(payload.pattern)
    await record_admin_action(
        session,
        request,
        "invalidate",
        "cache",
        details={"tag": payload.tag, "pattern": payload.pattern, "removed": removed},
    )
    return ApiResponse[Dict[str, Any]](message=f"Invalidated {removed} cache entries", data={"removed": removed})


@router.post("/cleanup", response_model=ApiResponse[Dict[str, Any]], summary="Remove Expired Entries")
async def cleanup_cache() -> ApiResponse[Dict[str, Any]]:
    removed = cache_manager.cleanup_expired()
    logger.info(f"Cache cleanup removed {removed} expired entries")
    return ApiResponse[Dict[str, Any]](message=f"Removed {removed} expired entries", data={"removed": removed})
