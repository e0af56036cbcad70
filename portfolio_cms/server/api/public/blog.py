"""
Public blog endpoints.

Serves published, active posts to the site. List responses are cached by the
response cache middleware and by the query optimizer; searches are not cached.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.models.io.blog_posts import PublicBlogPost, PublicBlogPostSummary
from portfolio_cms.core.models.io.common import ApiResponse, PaginatedResponse
from portfolio_cms.server.services.content import ContentService

router = APIRouter(tags=["blog"])


@router.get(
    "",
    response_model=PaginatedResponse[PublicBlogPostSummary],
    summary="List Blog Posts",
    description="List published blog posts, newest first, with optional category filter and full-text search.",
    response_description="A page of blog post summaries with pagination metadata.",
)
async def list_blog_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    category: Optional[str] = Query(None, max_length=100),
    search: Optional[str] = Query(None, max_length=200),
    session: AsyncSession = Depends(get_session),
) -> PaginatedResponse[PublicBlogPostSummary]:
    """
    List published blog posts.

    - **page**: Page number, starting at 1.
    - **limit**: Posts per page (1-50).
    - **category**: Case-insensitive category filter.
    - **search**: Matches title, excerpt or content.
    """
    result = await ContentService(session).get_blog_posts(page, limit, category, search)
    return PaginatedResponse[PublicBlogPostSummary](data=result["posts"], pagination=result["pagination"])


@router.get(
    "/{slug}",
    response_model=ApiResponse[PublicBlogPost],
    summary="Get Blog Post",
    description="Retrieve a published blog post by its slug.",
    response_description="The full blog post.",
    responses={404: {"description": "Blog post not found or not published"}},
)
async def get_blog_post(slug: str, session: AsyncSession = Depends(get_session)) -> ApiResponse[PublicBlogPost]:
    post = await ContentService(session).get_blog_post(slug)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog post not found")
    return ApiResponse[PublicBlogPost](data=post)
