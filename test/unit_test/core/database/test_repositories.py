"""Repository tests against an in-memory SQLite database."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database.base import load_json, utc_now
from portfolio_cms.core.database.entities import (
    AdminUser,
    AuditLog,
    BlogPost,
    ChatbotKnowledge,
    ChatbotSettings,
    NavigationItem,
    Project,
)
from portfolio_cms.core.database.repositories import (
    AdminUserRepository,
    AuditLogRepository,
    BlogPostRepository,
    ChatbotKnowledgeRepository,
    ChatbotSettingsRepository,
    ProjectRepository,
    SiteSettingRepository,
    SqlRepository,
)

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


def _post(slug: str, published: bool = True, days: int = 0, **kwargs) -> BlogPost:
    stamp = BASE_TIME + timedelta(days=days)
    return BlogPost(
        title=kwargs.pop("title", slug.replace("-", " ").title()),
        slug=slug,
        content=kwargs.pop("content", "Some content"),
        published=published,
        published_at=stamp if published else None,
        created_at=stamp,
        **kwargs,
    )


class TestSqlRepository:
    async def test_create_and_get_by_id(self, session: AsyncSession):
        repo = SqlRepository(session, NavigationItem)
        item = await repo.create(NavigationItem(title="Blog", href="/blog"))
        assert len(item.id) == 32
        assert (await repo.get_by_id(item.id)).title == "Blog"

    async def test_list_orders_by_sort_order(self, session: AsyncSession):
        repo = SqlRepository(session, NavigationItem)
        await repo.create(NavigationItem(title="Second", href="/b", sort_order=2))
        await repo.create(NavigationItem(title="First", href="/a", sort_order=1))
        assert [item.title for item in await repo.list()] == ["First", "Second"]

    async def test_soft_delete_hides_from_listing(self, session: AsyncSession):
        repo = SqlRepository(session, NavigationItem)
        item = await repo.create(NavigationItem(title="Old", href="/old"))

        deleted = await repo.soft_delete(item.id)

        assert deleted.is_active is False
        assert await repo.list() == []
        assert len(await repo.list(include_inactive=True)) == 1
        assert await repo.count() == 0

    async def test_soft_delete_unknown_returns_none(self, session: AsyncSession):
        assert await SqlRepository(session, NavigationItem).soft_delete("missing") is None

    async def test_hard_delete(self, session: AsyncSession):
        repo = SqlRepository(session, NavigationItem)
        item = await repo.create(NavigationItem(title="Gone", href="/gone"))
        assert await repo.delete(item.id) is True
        assert await repo.delete(item.id) is False

    async def test_filters_ignore_none_and_unknown_fields(self, session: AsyncSession):
        repo = SqlRepository(session, NavigationItem)
        await repo.create(NavigationItem(title="Anchor", href="#about", is_section=True))
        await repo.create(NavigationItem(title="Page", href="/blog", is_section=False))

        pages = await repo.list(filters={"is_section": False, "category": None, "nonexistent": "x"})
        assert [item.title for item in pages] == ["Page"]

    async def test_paginate_returns_page_and_total(self, session: AsyncSession):
        repo = SqlRepository(session, NavigationItem)
        for index in range(5):
            await repo.create(NavigationItem(title=f"Item {index}", href=f"/{index}", sort_order=index))

        items, total = await repo.paginate(page=2, limit=2)

        assert total == 5
        assert [item.title for item in items] == ["Item 2", "Item 3"]

    async def test_apply_changes_updates_timestamp(self, session: AsyncSession):
        repo = SqlRepository(session, NavigationItem)
        item = await repo.create(NavigationItem(title="Old", href="/x", updated_at=BASE_TIME))
        updated = await repo.apply_changes(item, {"title": "New"})
        assert updated.title == "New"
        assert updated.updated_at > BASE_TIME


class TestBlogPostRepository:
    async def test_list_published_excludes_drafts_and_inactive(self, session: AsyncSession):
        repo = BlogPostRepository(session)
        await repo.create(_post("published-post", days=1))
        await repo.create(_post("draft-post", published=False))
        await repo.create(_post("deleted-post", days=2, is_active=False))

        posts, total = await repo.list_published()

        assert total == 1
        assert [post.slug for post in posts] == ["published-post"]

    async def test_list_published_newest_first(self, session: AsyncSession):
        repo = BlogPostRepository(session)
        await repo.create(_post("older-post", days=1))
        await repo.create(_post("newer-post", days=5))

        posts, _ = await repo.list_published()
        assert [post.slug for post in posts] == ["newer-post", "older-post"]

    async def test_category_filter_is_case_insensitive(self, session: AsyncSession):
        repo = BlogPostRepository(session)
        await repo.create(_post("ai-post", category="AI Tools"))
        await repo.create(_post("news-post", category="News"))

        posts, total = await repo.list_published(category="ai tools")
        assert total == 1
        assert posts[0].slug == "ai-post"

    async def test_search_matches_title_and_content(self, session: AsyncSession):
        repo = BlogPostRepository(session)
        await repo.create(_post("first-post", title="Automating invoices"))
        await repo.create(_post("second-post", content="All about WORKFLOWS"))
        await repo.create(_post("third-post", title="Unrelated"))

        by_title, _ = await repo.list_published(search="invoice")
        by_content, _ = await repo.list_published(search="workflows")

        assert [post.slug for post in by_title] == ["first-post"]
        assert [post.slug for post in by_content] == ["second-post"]

    async def test_get_published_by_slug(self, session: AsyncSession):
        repo = BlogPostRepository(session)
        await repo.create(_post("visible-post"))
        await repo.create(_post("hidden-post", published=False))

        assert (await repo.get_published_by_slug("visible-post")) is not None
        assert await repo.get_published_by_slug("hidden-post") is None

    async def test_slug_exists_with_exclusion(self, session: AsyncSession):
        repo = BlogPostRepository(session)
        post = await repo.create(_post("taken-slug"))
        assert await repo.slug_exists("taken-slug")
        assert not await repo.slug_exists("taken-slug", exclude_id=post.id)
        assert not await repo.slug_exists("free-slug")

    async def test_tags_are_stored_as_json(self, session: AsyncSession):
        post = _post("tagged-post")
        post.set_tags_list(["python", "fastapi"])
        post = await BlogPostRepository(session).create(post)
        assert post.get_tags_list() == ["python", "fastapi"]


class TestProjectRepository:
    async def test_get_by_slug_ignores_inactive(self, session: AsyncSession):
        repo = ProjectRepository(session)
        await repo.create(Project(title="Live", slug="live-project", description="d"))
        await repo.create(Project(title="Gone", slug="gone-project", description="d", is_active=False))

        assert (await repo.get_by_slug("live-project")).title == "Live"
        assert await repo.get_by_slug("gone-project") is None
        assert await repo.get_by_slug("gone-project", include_inactive=True) is not None


class TestSiteSettingRepository:
    async def test_set_value_inserts_then_replaces(self, session: AsyncSession):
        repo = SiteSettingRepository(session)
        assert await repo.get_value("site") is None

        await repo.set_value("site", {"site_name": "One"})
        await repo.set_value("site", {"site_name": "Two"})

        assert await repo.get_value("site") == {"site_name": "Two"}
        assert await repo.count() == 1


class TestAdminUserRepository:
    async def test_get_by_email_is_case_insensitive(self, session: AsyncSession):
        repo = AdminUserRepository(session)
        await repo.create(AdminUser(email="admin@example.com", password_hash="x"))
        assert (await repo.get_by_email("  Admin@Example.COM ")) is not None
        assert await repo.get_by_email("other@example.com") is None


class TestChatbotRepositories:
    async def test_search_terms_orders_by_priority(self, session: AsyncSession):
        repo = ChatbotKnowledgeRepository(session)
        await repo.create(ChatbotKnowledge(title="Pricing", content="Rates for automation work", priority=1))
        await repo.create(ChatbotKnowledge(title="Services", content="I build automation workflows", priority=5))
        await repo.create(ChatbotKnowledge(title="Hidden", content="automation", priority=9, is_active=False))

        items = await repo.search_terms(["automation"])

        assert [item.title for item in items] == ["Services", "Pricing"]
        assert await repo.search_terms([]) == []

    async def test_get_current_settings_is_latest_updated(self, session: AsyncSession):
        repo = ChatbotSettingsRepository(session)
        assert await repo.get_current() is None
        await repo.create(ChatbotSettings(model_name="old", updated_at=BASE_TIME))
        await repo.create(ChatbotSettings(model_name="new", is_active=False, updated_at=BASE_TIME + timedelta(days=1)))

        current = await repo.get_current()
        assert current.model_name == "new"


class TestAuditLogRepository:
    @pytest.fixture
    async def seeded(self, session: AsyncSession) -> AuditLogRepository:
        repo = AuditLogRepository(session)
        now = utc_now()
        await repo.create(AuditLog(action="login", resource="auth", created_at=now - timedelta(hours=1)))
        await repo.create(
            AuditLog(action="login_failed", resource="auth", success=False, severity="warning", created_at=now)
        )
        await repo.create(AuditLog(action="create", resource="blog_post", created_at=now - timedelta(days=400)))
        return repo

    async def test_query_filters_and_orders(self, seeded: AuditLogRepository):
        entries, total = await seeded.query(resource="auth")
        assert total == 2
        assert [entry.action for entry in entries] == ["login_failed", "login"]

        failed, _ = await seeded.query(success=False)
        assert [entry.action for entry in failed] == ["login_failed"]

        warnings, _ = await seeded.query(severities=["warning", "critical"])
        assert len(warnings) == 1

    async def test_count_by_groups_recent_entries(self, seeded: AuditLogRepository):
        counts = await seeded.count_by(AuditLog.action, utc_now() - timedelta(days=7))
        assert counts == {"login": 1, "login_failed": 1}

    async def test_delete_older_than(self, seeded: AuditLogRepository):
        deleted = await seeded.delete_older_than(utc_now() - timedelta(days=365))
        assert deleted == 1
        assert await seeded.count() == 2


def test_load_json_falls_back_on_bad_values():
    assert load_json(None, []) == []
    assert load_json("not json", {}) == {}
    assert load_json('{"a": 1}', []) == []
    assert load_json('["a"]', []) == ["a"]
