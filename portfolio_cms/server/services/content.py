"""
Public content service.

Every read served to visitors (JSON API and rendered pages) goes through
:class:`ContentService`. Queries run through the query optimizer so results are
cached under the tags that admin writes invalidate, and rows are transformed
into the public shapes defined in ``portfolio_cms.core.models.io``.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from portfolio_cms.core.cache.invalidation import (
    TAG_ANALYTICS,
    TAG_BLOGS,
    TAG_CASE_STUDIES,
    TAG_CHATBOT,
    TAG_PROJECTS,
    TAG_SITE,
)
from portfolio_cms.core.cache.query_optimizer import QueryCacheConfig, QueryOptimizer, query_optimizer
from portfolio_cms.core.database.base import load_json, utc_now
from portfolio_cms.core.database.entities.blog_posts import BlogPost
from portfolio_cms.core.database.entities.case_studies import CaseStudy
from portfolio_cms.core.database.entities.chatbot import ChatbotConversation, ChatbotKnowledge, ChatbotQuestion
from portfolio_cms.core.database.entities.experience import ExperienceEntry
from portfolio_cms.core.database.entities.projects import Project
from portfolio_cms.core.database.entities.site import ContentSection, NavigationItem, SocialLink
from portfolio_cms.core.database.entities.skills import SkillCategory, Tool
from portfolio_cms.core.database.repositories import (
    AuditLogRepository,
    BlogPostRepository,
    CaseStudyRepository,
    ChatbotQuestionRepository,
    ProjectRepository,
    SiteSettingRepository,
    SqlRepository,
)
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.blog_posts import PublicBlogPost, PublicBlogPostSummary
from portfolio_cms.core.models.io.case_studies import DEFAULT_COLOR, PublicCaseStudy
from portfolio_cms.core.models.io.chatbot import PublicChatbotQuestion
from portfolio_cms.core.models.io.common import Pagination
from portfolio_cms.core.models.io.experience import PublicExperience
from portfolio_cms.core.models.io.projects import PublicProject
from portfolio_cms.core.models.io.site import (
    PublicContentSection,
    PublicNavigationItem,
    PublicSkillCategory,
    PublicSocialLink,
    PublicTool,
    SiteSettingsPayload,
)
from portfolio_cms.server.core.config import settings

logger = get_logger(__name__)

PLACEHOLDER_IMAGE = "/static/placeholder.svg"
DEFAULT_CATEGORY = "Uncategorized"
WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 160
SITE_SETTINGS_KEY = "site"

BLOG_CACHE = QueryCacheConfig(ttl=300, tags=(TAG_BLOGS,))
PROJECT_CACHE = QueryCacheConfig(ttl=600, tags=(TAG_PROJECTS,))
CASE_STUDY_CACHE = QueryCacheConfig(ttl=900, tags=(TAG_CASE_STUDIES,))
SITE_CACHE = QueryCacheConfig(ttl=600, tags=(TAG_SITE,))
CHATBOT_CACHE = QueryCacheConfig(ttl=600, tags=(TAG_CHATBOT,))
ANALYTICS_CACHE = QueryCacheConfig(ttl=1800, tags=(TAG_ANALYTICS,))

_WORKFLOW_PATTERN = re.compile(r"automation|workflow", re.IGNORECASE)
_TAG_PATTERN = re.compile(r"<[^>]+>|[#*_`>\[\]]")


def calculate_read_time(content: str) -> str:
    """Estimated reading time at 200 words per minute, never below one minute."""
    words = len(content.split()) if content else 0
    return f"{max(1, math.ceil(words / WORDS_PER_MINUTE))} min read"


def make_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    """Plain-text prefix of ``content`` cut on a word boundary."""
    text = " ".join(_TAG_PATTERN.sub(" ", content or "").split())
    if len(text) <= length:
        return text
    cut = text[:length].rsplit(" ", 1)[0]
    return f"{cut}..."


def _iso_date(value: Optional[datetime]) -> Optional[str]:
    return value.date().isoformat() if value else None


def blog_summary(post: BlogPost) -> Dict[str, Any]:
    """Public list representation of a blog post."""
    return PublicBlogPostSummary(
        id=post.id,
        slug=post.slug,
        title=post.title,
        excerpt=post.excerpt or make_excerpt(post.content),
        date=_iso_date(post.published_at or post.created_at),
        read_time=calculate_read_time(post.content),
        category=post.category or DEFAULT_CATEGORY,
        image=post.image_url or PLACEHOLDER_IMAGE,
        author=post.author or settings.default_author,
        featured=post.featured,
        published_at=post.published_at.isoformat() if post.published_at else None,
    ).model_dump()


def blog_detail(post: BlogPost) -> Dict[str, Any]:
    """Full public representation of a blog post."""
    return PublicBlogPost(
        **blog_summary(post),
        content=post.content,
        tags=[str(tag) for tag in post.get_tags_list()],
        meta_title=post.meta_title or post.title,
        meta_description=post.meta_description or post.excerpt or make_excerpt(post.content),
    ).model_dump()


def project_type(project: Project) -> str:
    """``workflow`` for automation projects, ``tool`` for everything else."""
    haystack = f"{project.category or ''} {project.title}"
    return "workflow" if _WORKFLOW_PATTERN.search(haystack) else "tool"


def public_project(project: Project) -> Dict[str, Any]:
    return PublicProject(
        id=project.id,
        slug=project.slug,
        title=project.title,
        description=project.description,
        image=project.image or PLACEHOLDER_IMAGE,
        technologies=[str(tech) for tech in load_json(project.technologies, [])],
        github_url=project.github_url,
        live_url=project.live_url,
        category=project.category,
        status=project.status,
        type=project_type(project),
        featured=project.featured,
    ).model_dump()


def public_case_study(case_study: CaseStudy) -> Dict[str, Any]:
    return PublicCaseStudy(
        id=case_study.id,
        slug=case_study.slug,
        title=case_study.title,
        subtitle=case_study.subtitle,
        description=case_study.description,
        full_description=case_study.full_description,
        image=case_study.image or PLACEHOLDER_IMAGE,
        metrics=load_json(case_study.metrics, {}),
        results=load_json(case_study.results, []),
        tools=[str(tool) for tool in load_json(case_study.tools, [])],
        timeline=load_json(case_study.timeline, []),
        category=case_study.category,
        color=case_study.color or DEFAULT_COLOR,
        icon=case_study.icon,
        challenge=case_study.challenge,
        solution=case_study.solution,
        featured=case_study.featured,
    ).model_dump()


class ContentService:
    """Cached read access to published site content."""

    def __init__(self, session: AsyncSession, optimizer: Optional[QueryOptimizer] = None) -> None:
        self.session = session
        self.optimizer = optimizer or query_optimizer

    # ------------------------------------------------------------------
    # Blog
    # ------------------------------------------------------------------

    async def get_blog_posts(
        self,
        page: int = 1,
        limit: int = 10,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Published posts, newest first.

        Returns:
            ``{"posts": [...], "pagination": {...}}``. Search results bypass the cache.
        """

        async def run() -> Dict[str, Any]:
            posts, total = await BlogPostRepository(self.session).list_published(page, limit, category, search)
            return {
                "posts": [blog_summary(post) for post in posts],
                "pagination": Pagination.build(page, limit, total).model_dump(),
            }

        cache = QueryCacheConfig(ttl=BLOG_CACHE.ttl, tags=BLOG_CACHE.tags, use_cache=not search)
        return await self.optimizer.optimized_query(
            "blog_posts",
            run,
            cache=cache,
            params={"page": page, "limit": limit, "category": category, "search": search},
        )

    async def get_blog_post(self, slug: str) -> Optional[Dict[str, Any]]:
        async def run() -> Optional[Dict[str, Any]]:
            post = await BlogPostRepository(self.session).get_published_by_slug(slug)
            return blog_detail(post) if post else None

        return await self.optimizer.optimized_query("blog_post", run, cache=BLOG_CACHE, params={"slug": slug})

    async def get_recent_posts(self, limit: int = 3) -> List[Dict[str, Any]]:
        result = await self.get_blog_posts(page=1, limit=limit)
        return result["posts"]

    # ------------------------------------------------------------------
    # Projects and case studies
    # ------------------------------------------------------------------

    async def get_projects(
        self, page: int = 1, limit: int = 50, category: Optional[str] = None
    ) -> Dict[str, Any]:
        async def run() -> Dict[str, Any]:
            projects, total = await ProjectRepository(self.session).paginate(
                page, limit, filters={"category": category}
            )
            return {
                "projects": [public_project(project) for project in projects],
                "pagination": Pagination.build(page, limit, total).model_dump(),
            }

        return await self.optimizer.optimized_query(
            "projects", run, cache=PROJECT_CACHE, params={"page": page, "limit": limit, "category": category}
        )

    async def get_project(self, id_or_slug: str) -> Optional[Dict[str, Any]]:
        """Project looked up by slug first, then by id."""

        async def run() -> Optional[Dict[str, Any]]:
            repo = ProjectRepository(self.session)
            project = await repo.get_by_slug(id_or_slug)
            if project is None:
                project = await repo.get_by_id(id_or_slug)
                if project is not None and not project.is_active:
                    project = None
            return public_project(project) if project else None

        return await self.optimizer.optimized_query(
            "project", run, cache=PROJECT_CACHE, params={"id_or_slug": id_or_slug}
        )

    async def get_case_studies(self, limit: int = 10) -> List[Dict[str, Any]]:
        async def run() -> List[Dict[str, Any]]:
            items = await CaseStudyRepository(self.session).list(limit=limit)
            return [public_case_study(item) for item in items]

        return await self.optimizer.optimized_query(
            "case_studies", run, cache=CASE_STUDY_CACHE, params={"limit": limit}
        )

    async def get_case_study(self, slug: str) -> Optional[Dict[str, Any]]:
        async def run() -> Optional[Dict[str, Any]]:
            item = await CaseStudyRepository(self.session).get_by_slug(slug)
            return public_case_study(item) if item else None

        return await self.optimizer.optimized_query("case_study", run, cache=CASE_STUDY_CACHE, params={"slug": slug})

    # ------------------------------------------------------------------
    # Site structure
    # ------------------------------------------------------------------

    async def _active_rows(self, name: str, model, transform, filters: Optional[Dict[str, Any]] = None):
        async def run() -> List[Dict[str, Any]]:
            rows = await SqlRepository(self.session, model).list(filters=filters)
            return [transform(row) for row in rows]

        return await self.optimizer.optimized_query(name, run, cache=SITE_CACHE, params=filters)

    async def get_skills(self) -> List[Dict[str, Any]]:
        return await self._active_rows(
            "skills",
            SkillCategory,
            lambda row: PublicSkillCategory(
                id=row.id,
                title=row.title,
                description=row.description,
                color=row.color,
                skills=row.get_skills_list(),
            ).model_dump(),
        )

    async def get_tools(self) -> List[Dict[str, Any]]:
        return await self._active_rows(
            "tools", Tool, lambda row: PublicTool.model_validate(row, from_attributes=True).model_dump()
        )

    async def get_navigation(self) -> List[Dict[str, Any]]:
        return await self._active_rows(
            "navigation",
            NavigationItem,
            lambda row: PublicNavigationItem.model_validate(row, from_attributes=True).model_dump(),
        )

    async def get_social_links(self) -> List[Dict[str, Any]]:
        return await self._active_rows(
            "social_links",
            SocialLink,
            lambda row: PublicSocialLink.model_validate(row, from_attributes=True).model_dump(),
        )

    async def get_experience(self) -> List[Dict[str, Any]]:
        return await self._active_rows(
            "experience", ExperienceEntry, lambda row: PublicExperience.model_validate(row).model_dump()
        )

    async def get_content_sections(self, section: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self._active_rows(
            "content_sections",
            ContentSection,
            lambda row: PublicContentSection(
                id=row.id,
                section_name=row.section_name,
                content=row.content,
                metadata=load_json(row.section_metadata, {}),
            ).model_dump(),
            filters={"section_name": section} if section else None,
        )

    async def get_site_settings(self) -> Dict[str, Any]:
        """Stored site settings merged over the defaults."""

        async def run() -> Dict[str, Any]:
            stored = await SiteSettingRepository(self.session).get_value(SITE_SETTINGS_KEY) or {}
            defaults = SiteSettingsPayload(site_name=settings.site_name).model_dump()
            return {**defaults, **{key: value for key, value in stored.items() if key in defaults}}

        return await self.optimizer.optimized_query("site_settings", run, cache=SITE_CACHE)

    async def get_chatbot_questions(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        async def run() -> List[Dict[str, Any]]:
            rows = await ChatbotQuestionRepository(self.session).list(filters={"category": category})
            return [PublicChatbotQuestion.model_validate(row, from_attributes=True).model_dump() for row in rows]

        return await self.optimizer.optimized_query(
            "chatbot_questions", run, cache=CHATBOT_CACHE, params={"category": category}
        )

    # ------------------------------------------------------------------
    # Dashboard analytics
    # ------------------------------------------------------------------

    async def get_analytics(self, days: int = 30) -> Dict[str, Any]:
        """Content counts and recent activity for the admin dashboard."""

        async def run() -> Dict[str, Any]:
            blog_repo = BlogPostRepository(self.session)
            since = utc_now() - timedelta(days=days)
            conversations = SqlRepository(self.session, ChatbotConversation)
            recent_conversations = await conversations.count_statement(
                select(ChatbotConversation).where(ChatbotConversation.created_at >= since)
            )
            recent_posts = await blog_repo.list(limit=5, include_inactive=True)
            activity, _ = await AuditLogRepository(self.session).query(limit=10)
            published = await blog_repo.count(filters={"published": True})
            total_posts = await blog_repo.count()
            return {
                "blog_posts": {"total": total_posts, "published": published, "drafts": total_posts - published},
                "projects": await ProjectRepository(self.session).count(),
                "case_studies": await CaseStudyRepository(self.session).count(),
                "knowledge_items": await SqlRepository(self.session, ChatbotKnowledge).count(),
                "conversations": recent_conversations,
                "recent_posts": [
                    {
                        "id": post.id,
                        "title": post.title,
                        "slug": post.slug,
                        "published": post.published,
                        "created_at": post.created_at.isoformat(),
                    }
                    for post in recent_posts
                ],
                "recent_activity": [
                    {
                        "action": entry.action,
                        "resource": entry.resource,
                        "resource_id": entry.resource_id,
                        "user_email": entry.user_email,
                        "created_at": entry.created_at.isoformat(),
                    }
                    for entry in activity
                ],
            }

        return await self.optimizer.optimized_query("analytics", run, cache=ANALYTICS_CACHE, params={"days": days})
