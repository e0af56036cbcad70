"""
Blog post repository.

Adds the public-facing queries (published posts only, newest first) on top of
the generic slug repository.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.blog_posts import BlogPost
from .base import QueryBuilder, SlugRepository


class BlogPostRepository(SlugRepository[BlogPost]):
    """Repository for blog posts."""

    search_fields = ("title", "excerpt", "content", "category")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BlogPost, order_by=(BlogPost.created_at.desc(),))

    def _published_query(self, category: Optional[str] = None, search: Optional[str] = None):
        stmt = self.build_query({"published": True})
        if category:
            stmt = stmt.where(BlogPost.category.ilike(f"%{category.strip()}%"))
        return QueryBuilder.apply_search(stmt, BlogPost, search, ("title", "excerpt", "content"))

    async def list_published(
        self,
        page: int = 1,
        limit: int = 10,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[BlogPost], int]:
        """Published, active posts ordered by publish date then creation date, newest first.

        Returns:
            ``(posts, total)`` for the requested page.
        """
        stmt = self._published_query(category, search)
        total = await self.count_statement(stmt)
        stmt = stmt.order_by(BlogPost.published_at.desc(), BlogPost.created_at.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, (page - 1) * limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_published_by_slug(self, slug: str) -> Optional[BlogPost]:
        stmt = self._published_query().where(BlogPost.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalars().first()
