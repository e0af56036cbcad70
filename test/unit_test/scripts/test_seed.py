"""Unit tests for the database seeding script."""

from unittest.mock import AsyncMock, patch

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from portfolio_cms.core.database.entities import BlogPost, NavigationItem
from portfolio_cms.core.database.entities.admin_users import AdminUser
from portfolio_cms.core.database.repositories import SiteSettingRepository
from portfolio_cms.scripts import seed


class TestEnsureRows:
    async def test_inserts_only_missing_rows(self, session: AsyncSession):
        session.add(NavigationItem(title="Custom Blog", href="/blog"))
        await session.commit()

        inserted = await seed.ensure_rows(session, NavigationItem, "href", seed.NAVIGATION)

        assert inserted == len(seed.NAVIGATION) - 1
        result = await session.execute(select(NavigationItem).where(NavigationItem.href == "/blog"))
        assert [item.title for item in result.scalars().all()] == ["Custom Blog"]

    async def test_published_posts_get_publish_date(self, session: AsyncSession):
        await seed.ensure_rows(session, BlogPost, "slug", seed.BLOG_POSTS)

        post = (await session.execute(select(BlogPost))).scalars().one()
        assert post.published is True
        assert post.published_at is not None


class TestSeedContent:
    async def test_first_run_inserts_everything(self, session: AsyncSession):
        counts = await seed.seed_content(session)

        assert counts["navigation_items"] == len(seed.NAVIGATION)
        assert counts["projects"] == len(seed.PROJECTS)
        assert counts["experience_entries"] == len(seed.EXPERIENCE)
        assert counts["chatbot_questions"] == len(seed.QUESTIONS)
        assert counts["site_settings"] == 1
        stored = await SiteSettingRepository(session).get_value("site")
        assert stored["maintenance_mode"] is False

    async def test_second_run_is_a_no_op(self, session: AsyncSession):
        await seed.seed_content(session)

        counts = await seed.seed_content(session)

        assert "site_settings" not in counts
        assert sum(counts.values()) == 0


class TestSeedAdmin:
    async def test_requires_credentials(self, session: AsyncSession, monkeypatch):
        monkeypatch.setattr(seed.settings, "admin_email", None)
        assert await seed.seed_admin(session) is False

    async def test_creates_admin(self, session: AsyncSession, monkeypatch):
        monkeypatch.setattr(seed.settings, "admin_email", "Owner@Example.com")
        monkeypatch.setattr(seed.settings, "admin_password", "a-long-password")

        assert await seed.seed_admin(session) is True
        users = (await session.execute(select(AdminUser))).scalars().all()
        assert [user.email for user in users] == ["owner@example.com"]


def test_main_parses_flags():
    with patch.object(seed, "run", new=AsyncMock(return_value=0)) as mock_run:
        assert seed.main(["--admin-only", "--reset"]) == 0
    mock_run.assert_awaited_once_with(admin_only=True, reset=True)
