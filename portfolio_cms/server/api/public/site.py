"""
Public site structure endpoints.

Skills, tools, experience, navigation, social links and named content sections, each
returned as active rows in display order.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.models.io.common import ApiResponse
from portfolio_cms.core.models.io.experience import PublicExperience
from portfolio_cms.core.models.io.site import (
    PublicContentSection,
    PublicNavigationItem,
    PublicSkillCategory,
    PublicSocialLink,
    PublicTool,
)
from portfolio_cms.server.services.content import ContentService

router = APIRouter(tags=["site"])


@router.get("/skills", response_model=ApiResponse[List[PublicSkillCategory]], summary="List Skill Categories")
async def list_skills(session: AsyncSession = Depends(get_session)) -> ApiResponse[List[PublicSkillCategory]]:
    return ApiResponse[List[PublicSkillCategory]](data=await ContentService(session).get_skills())


@router.get("/tools", response_model=ApiResponse[List[PublicTool]], summary="List Tools")
async def list_tools(session: AsyncSession = Depends(get_session)) -> ApiResponse[List[PublicTool]]:
    return ApiResponse[List[PublicTool]](data=await ContentService(session).get_tools())


@router.get("/navigation", response_model=ApiResponse[List[PublicNavigationItem]], summary="List Navigation Items")
async def list_navigation(session: AsyncSession = Depends(get_session)) -> ApiResponse[List[PublicNavigationItem]]:
    return ApiResponse[List[PublicNavigationItem]](data=await ContentService(session).get_navigation())


@router.get("/social-links", response_model=ApiResponse[List[PublicSocialLink]], summary="List Social Links")
async def list_social_links(session: AsyncSession = Depends(get_session)) -> ApiResponse[List[PublicSocialLink]]:
    return ApiResponse[List[PublicSocialLink]](data=await ContentService(session).get_social_links())


@router.get(
    "/content",
    response_model=ApiResponse[List[PublicContentSection]],
    summary="List Content Sections",
    description="List active content sections, optionally only the one named by ``section``.",
)
async def list_content_sections(
    section: Optional[str] = Query(None, max_length=100),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[List[PublicContentSection]]:
    return ApiResponse[List[PublicContentSection]](data=await ContentService(session).get_content_sections(section))


@router.get("/experience", response_model=ApiResponse[List[PublicExperience]], summary="List Experience Entries")
async def list_experience(session: AsyncSession = Depends(get_session)) -> ApiResponse[List[PublicExperience]]:
    return ApiResponse[List[PublicExperience]](data=await ContentService(session).get_experience())
