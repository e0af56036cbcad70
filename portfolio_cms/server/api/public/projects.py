"""Public project and case study endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.models.io.case_studies import PublicCaseStudy
from portfolio_cms.core.models.io.common import ApiResponse, PaginatedResponse
from portfolio_cms.core.models.io.projects import PublicProject
from portfolio_cms.server.services.content import ContentService

router = APIRouter(tags=["projects"])
case_studies_router = APIRouter(tags=["case-studies"])


@router.get(
    "",
    response_model=PaginatedResponse[PublicProject],
    summary="List Projects",
    description="List active projects in display order.",
    response_description="A page of projects with pagination metadata.",
)
async def list_projects(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    category: Optional[str] = Query(None, max_length=100),
    session: AsyncSession = Depends(get_session),
) -> PaginatedResponse[PublicProject]:
    """
    List projects ordered by ``sort_order`` then newest first.

    Each project carries a ``type`` of ``workflow`` (automation work) or ``tool``.
    """
    result = await ContentService(session).get_projects(page, limit, category)
    return PaginatedResponse[PublicProject](data=result["projects"], pagination=result["pagination"])


@router.get(
    "/{id_or_slug}",
    response_model=ApiResponse[PublicProject],
    summary="Get Project",
    description="Retrieve an active project by slug or id.",
    responses={404: {"description": "Project not found"}},
)
async def get_project(id_or_slug: str, session: AsyncSession = Depends(get_session)) -> ApiResponse[PublicProject]:
    project = await ContentService(session).get_project(id_or_slug)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return ApiResponse[PublicProject](data=project)


@case_studies_router.get(
    "",
    response_model=ApiResponse[List[PublicCaseStudy]],
    summary="List Case Studies",
    description="List active case studies in display order with their JSON fields parsed.",
)
async def list_case_studies(
    limit: int = Query(10, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[List[PublicCaseStudy]]:
    return ApiResponse[List[PublicCaseStudy]](data=await ContentService(session).get_case_studies(limit))


@case_studies_router.get(
    "/{slug}",
    response_model=ApiResponse[PublicCaseStudy],
    summary="Get Case Study",
    description="Retrieve an active case study by slug.",
    responses={404: {"description": "Case study not found"}},
)
async def get_case_study(slug: str, session: AsyncSession = Depends(get_session)) -> ApiResponse[PublicCaseStudy]:
    item = await ContentService(session).get_case_study(slug)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Case study not found")
    return ApiResponse[PublicCaseStudy](data=item)
