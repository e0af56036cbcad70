"""
Admin blog post endpoints.

CRUD for blog posts. Slugs are generated from the title when omitted and must
be unique. Publishing a post stamps ``published_at`` the first time;
unpublishing clears it.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.cache.invalidation import invalidate_blog_cache
from portfolio_cms.core.database import get_session
from portfolio_cms.core.database.base import utc_now
from portfolio_cms.core.database.entities.blog_posts import BlogPost
from portfolio_cms.core.database.repositories import BlogPostRepository
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.blog_posts import BlogPostCreate, BlogPostRead, BlogPostUpdate
from portfolio_cms.core.models.io.common import ApiResponse, MessageResponse, PaginatedResponse, Pagination
from portfolio_cms.server.services.audit import record_admin_action

from .crud import assign_slug, parse_filter_value, to_columns

logger = get_logger(__name__)

router = APIRouter(tags=["admin-blog"])

RESOURCE = "blog_post"
LABEL = "Blog post"


def apply_publish_state(post: BlogPost, published: Optional[bool]) -> None:
    """Stamp ``published_at`` on first publish and clear it on unpublish."""
    if published is None:
        return
    if published and post.published_at is None:
        post.published_at = utc_now()
    elif not published:
        post.published_at = None


async def _load(repo: BlogPostRepository, post_id: str) -> BlogPost:
    post = await repo.get_by_id(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog post not found")
    return post


@router.get(
    "",
    response_model=PaginatedResponse[BlogPostRead],
    summary="List Blog Posts",
    description="List every blog post including drafts, newest first.",
)
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    category: Optional[str] = Query(None, max_length=100),
    published: Optional[str] = Query(None, description="true/false"),
    include_inactive: bool = Query(False),
    session: AsyncSession = Depends(get_session),
) -> PaginatedResponse[BlogPostRead]:
    """
    List blog posts for the admin panel.

    - **search**: Matches title, excerpt, content or category.
    - **category**: Exact category.
    - **published**: Only published (``true``) or only drafts (``false``).
    - **include_inactive**: Include soft-deleted posts.
    """
    filters: Dict[str, Any] = {"category": category}
    if published is not None:
        filters["published"] = parse_filter_value(published)
    posts, total = await BlogPostRepository(session).paginate(page, limit, filters, search, include_inactive)
    return PaginatedResponse[BlogPostRead](
        data=[BlogPostRead.model_validate(post) for post in posts],
        pagination=Pagination.build(page, limit, total),
    )


@router.get(
    "/{post_id}",
    response_model=ApiResponse[BlogPostRead],
    summary="Get Blog Post",
    responses={404: {"description": "Blog post not found"}},
)
async def get_post(post_id: str, session: AsyncSession = Depends(get_session)) -> ApiResponse[BlogPostRead]:
    post = await _load(BlogPostRepository(session), post_id)
    return ApiResponse[BlogPostRead](data=BlogPostRead.model_validate(post))


@router.post(
    "",
    response_model=ApiResponse[BlogPostRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Blog Post",
    description="Create a blog post; the slug is generated from the title when omitted.",
    responses={400: {"description": "Invalid data or duplicate slug"}},
)
async def create_post(
    request: Request,
    payload: BlogPostCreate,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[BlogPostRead]:
    """
    Create a blog post.

    - **title**: Post title.
    - **slug**: Optional URL slug; must be unique.
    - **content**: Markdown or HTML body.
    - **tags**: List of tag names.
    - **published**: Publish immediately; ``published_at`` is set to now.
    """
    repo = BlogPostRepository(session)
    values = to_columns(BlogPost, payload.model_dump(), json_fields=("tags",))
    await assign_slug(repo, values, "title", LABEL)
    post = BlogPost(**values)
    apply_publish_state(post, payload.published)
    post = await repo.create(post)

    invalidate_blog_cache()
    await record_admin_action(
        session, request, "create", RESOURCE, post.id, details={"title": post.title, "published": post.published}
    )
    logger.info(f"Created blog post '{post.slug}'")
    return ApiResponse[BlogPostRead](message="Blog post created successfully", data=BlogPostRead.model_validate(post))


async def _update(request: Request, post_id: str, payload: BlogPostUpdate, session: AsyncSession):
    repo = BlogPostRepository(session)
    post = await _load(repo, post_id)
    changes = to_columns(BlogPost, payload.model_dump(exclude_unset=True), json_fields=("tags",))
    if changes.get("slug"):
        await assign_slug(repo, changes, "title", LABEL, exclude_id=post.id)

    was_published = post.published
    for key, value in changes.items():
        setattr(post, key, value)
    apply_publish_state(post, changes.get("published"))
    post = await repo.update(post)

    invalidate_blog_cache()
    action = "update"
    if post.published != was_published:
        action = "publish" if post.published else "unpublish"
    await record_admin_action(session, request, action, RESOURCE, post.id, details={"fields": sorted(changes)})
    return ApiResponse[BlogPostRead](message="Blog post updated successfully", data=BlogPostRead.model_validate(post))


@router.put(
    "/{post_id}",
    response_model=ApiResponse[BlogPostRead],
    summary="Update Blog Post",
    description="Update the provided fields of a blog post.",
    responses={400: {"description": "Duplicate slug"}, 404: {"description": "Blog post not found"}},
)
async def update_post(
    request: Request,
    post_id: str,
    payload: BlogPostUpdate,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[BlogPostRead]:
    return await _update(request, post_id, payload, session)


@router.patch("/{post_id}", response_model=ApiResponse[BlogPostRead], summary="Patch Blog Post")
async def patch_post(
    request: Request,
    post_id: str,
    payload: BlogPostUpdate,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[BlogPostRead]:
    return await _update(request, post_id, payload, session)


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    summary="Delete Blog Post",
    description="Soft-delete a blog post; it disappears from the public site.",
    responses={404: {"description": "Blog post not found"}},
)
async def delete_post(request: Request, post_id: str, session: AsyncSession = Depends(get_session)) -> MessageResponse:
    post = await BlogPostRepository(session).soft_delete(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog post not found")
    invalidate_blog_cache()
    await record_admin_action(session, request, "delete", RESOURCE, post_id)
    return MessageResponse(message="Blog post deleted successfully")
