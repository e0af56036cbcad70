"""Tests for the public content service and its row transforms."""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.cache import query_optimizer
from portfolio_cms.core.cache.invalidation import invalidate_blog_cache
from portfolio_cms.core.database.base import dump_json
from portfolio_cms.core.database.entities import (
    AuditLog,
    BlogPost,
    CaseStudy,
    ContentSection,
    NavigationItem,
    Project,
    SkillCategory,
)
from portfolio_cms.core.database.repositories import SiteSettingRepository
from portfolio_cms.server.services.content import (
    PLACEHOLDER_IMAGE,
    SITE_SETTINGS_KEY,
    ContentService,
    blog_detail,
    blog_summary,
    calculate_read_time,
    make_excerpt,
    project_type,
)


async def _add(session: AsyncSession, *rows) -> None:
    session.add_all(rows)
    await session.commit()


class TestTransforms:
    @pytest.mark.parametrize(
        "words, expected", [(0, "1 min read"), (150, "1 min read"), (200, "1 min read"), (201, "2 min read")]
    )
    def test_read_time(self, words: int, expected: str):
        assert calculate_read_time(" ".join(["word"] * words)) == expected

    def test_excerpt_strips_markup_and_cuts_on_word(self):
        content = "# Title\n\n**Bold** text " + "lorem " * 60
        excerpt = make_excerpt(content, length=40)
        assert excerpt.startswith("Title Bold text lorem")
        assert excerpt.endswith("...")
        assert len(excerpt) <= 43

    def test_short_excerpt_is_unchanged(self):
        assert make_excerpt("Short <b>post</b>") == "Short post"

    def test_blog_summary_defaults(self):
        post = BlogPost(
            title="Hello",
            slug="hello",
            content="word " * 450,
            published=True,
            published_at=datetime(2024, 3, 5, 10, 0),
            created_at=datetime(2024, 3, 1),
        )
        summary = blog_summary(post)
        assert summary["date"] == "2024-03-05"
        assert summary["read_time"] == "3 min read"
        assert summary["category"] == "Uncategorized"
        assert summary["image"] == PLACEHOLDER_IMAGE
        assert summary["author"] == "Admin"
        assert summary["excerpt"].endswith("...")

    def test_blog_detail_meta_falls_back_to_title_and_excerpt(self):
        post = BlogPost(title="Hello", slug="hello", content="Body", excerpt="Short", tags=dump_json(["a", "b"]))
        detail = blog_detail(post)
        assert detail["meta_title"] == "Hello"
        assert detail["meta_description"] == "Short"
        assert detail["tags"] == ["a", "b"]

    @pytest.mark.parametrize(
        "title, category, expected",
        [
            ("Invoice Bot", "Automation", "workflow"),
            ("Email Workflow", None, "workflow"),
            ("Dashboard", "Web App", "tool"),
        ],
    )
    def test_project_type(self, title, category, expected):
        assert project_type(Project(title=title, slug="p-1", description="d", category=category)) == expected


class TestContentService:
    async def test_blog_posts_are_paginated_and_cached(self, session: AsyncSession):
        await _add(
            session,
            BlogPost(title="One", slug="one-post", content="a", published=True, published_at=datetime(2024, 1, 1)),
            BlogPost(title="Two", slug="two-post", content="b", published=True, published_at=datetime(2024, 1, 2)),
            BlogPost(title="Draft", slug="draft-post", content="c"),
        )
        service = ContentService(session)

        first = await service.get_blog_posts(page=1, limit=1)
        again = await service.get_blog_posts(page=1, limit=1)

        assert [post["slug"] for post in first["posts"]] == ["two-post"]
        assert first["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}
        assert again == first
        assert query_optimizer.get_query_stats().queries["blog_posts"]["from_cache"] == 1

    async def test_invalidation_makes_new_posts_visible(self, session: AsyncSession):
        service = ContentService(session)
        assert (await service.get_blog_posts())["posts"] == []

        await _add(session, BlogPost(title="New", slug="new-post", content="x", published=True))
        assert (await service.get_blog_posts())["posts"] == []

        invalidate_blog_cache()
        assert [post["slug"] for post in (await service.get_blog_posts())["posts"]] == ["new-post"]

    async def test_search_bypasses_cache(self, session: AsyncSession):
        await _add(session, BlogPost(title="Python tips", slug="python-tips", content="x", published=True))
        service = ContentService(session)
        await service.get_blog_posts(search="python")
        await service.get_blog_posts(search="python")
        assert query_optimizer.get_query_stats().queries["blog_posts"]["from_cache"] == 0

    async def test_blog_post_by_slug(self, session: AsyncSession):
        await _add(session, BlogPost(title="Hello", slug="hello-post", content="x", published=True))
        service = ContentService(session)
        assert (await service.get_blog_post("hello-post"))["title"] == "Hello"
        assert await service.get_blog_post("missing-post") is None

    async def test_project_lookup_by_slug_or_id(self, session: AsyncSession):
        project = Project(title="Bot", slug="bot-project", description="d", technologies=dump_json(["Python"]))
        hidden = Project(title="Hidden", slug="hidden-project", description="d", is_active=False)
        await _add(session, project, hidden)
        service = ContentService(session)

        assert (await service.get_project("bot-project"))["technologies"] == ["Python"]
        assert (await service.get_project(project.id))["slug"] == "bot-project"
        assert await service.get_project(hidden.id) is None

    async def test_case_studies_parse_json_fields(self, session: AsyncSession):
        await _add(
            session,
            CaseStudy(
                title="Study",
                slug="study-one",
                description="d",
                metrics=dump_json({"time": "-50%"}),
                results="not json",
                color="",
            ),
        )
        items = await ContentService(session).get_case_studies()
        assert items[0]["metrics"] == {"time": "-50%"}
        assert items[0]["results"] == []
        assert items[0]["color"] == "#3B82F6"

    async def test_site_structure_lists_active_rows(self, session: AsyncSession):
        await _add(
            session,
            NavigationItem(title="Blog", href="/blog", sort_order=2),
            NavigationItem(title="About", href="#about", sort_order=1),
            NavigationItem(title="Old", href="/old", is_active=False),
            SkillCategory(title="Backend", skills=dump_json([{"name": "Python", "proficiency": 90}, "junk"])),
            ContentSection(section_name="hero", content="Hi", section_metadata=dump_json({"cta": "Contact"})),
        )
        service = ContentService(session)

        assert [item["title"] for item in await service.get_navigation()] == ["About", "Blog"]
        assert (await service.get_skills())[0]["skills"] == [{"name": "Python", "proficiency": 90}]
        sections = await service.get_content_sections("hero")
        assert sections[0]["metadata"] == {"cta": "Contact"}
        assert await service.get_content_sections("missing") == []

    async def test_site_settings_merge_over_defaults(self, session: AsyncSession):
        service = ContentService(session)
        defaults = await service.get_site_settings()
        assert defaults["site_name"] == "Test Portfolio"
        assert defaults["maintenance_mode"] is False

        await SiteSettingRepository(session).set_value(
            SITE_SETTINGS_KEY, {"site_name": "Mine", "maintenance_mode": True, "unknown": 1}
        )
        query_optimizer.cache.reset()
        stored = await service.get_site_settings()
        assert stored["site_name"] == "Mine"
        assert stored["maintenance_mode"] is True
        assert "unknown" not in stored

    async def test_analytics_counts(self, session: AsyncSession):
        await _add(
            session,
            BlogPost(title="A", slug="a-post", content="x", published=True),
            BlogPost(title="B", slug="b-post", content="x"),
            Project(title="P", slug="p-project", description="d"),
            AuditLog(action="login", resource="auth", user_email="admin@example.com"),
        )
        analytics = await ContentService(session).get_analytics()

        assert analytics["blog_posts"] == {"total": 2, "published": 1, "drafts": 1}
        assert analytics["projects"] == 1
        assert analytics["case_studies"] == 0
        assert len(analytics["recent_posts"]) == 2
        assert analytics["recent_activity"][0]["action"] == "login"
