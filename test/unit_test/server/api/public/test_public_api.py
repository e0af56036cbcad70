"""Tests for the public JSON API, SEO routes and health endpoints."""

from __future__ import annotations

from datetime import datetime

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from portfolio_cms.core.database.base import dump_json
from portfolio_cms.core.database.entities import (
    BlogPost,
    CaseStudy,
    ChatbotKnowledge,
    ChatbotQuestion,
    ContactMessage,
    ContentSection,
    ExperienceEntry,
    NavigationItem,
    Project,
    SkillCategory,
    SocialLink,
    Tool,
)
from portfolio_cms.server.core.config import settings


@pytest.fixture
async def content(session: AsyncSession) -> None:
    session.add_all(
        [
            BlogPost(
                title="First post",
                slug="first-post",
                content="Hello world",
                category="News",
                published=True,
                published_at=datetime(2024, 1, 1),
            ),
            BlogPost(
                title="Second post",
                slug="second-post",
                content="Python automation tips",
                category="AI",
                tags=dump_json(["python"]),
                published=True,
                published_at=datetime(2024, 2, 1),
            ),
            BlogPost(title="Draft", slug="draft-post", content="Not yet"),
            Project(title="Invoice Bot", slug="invoice-bot", description="d", category="Automation", sort_order=1),
            Project(title="Dashboard", slug="dashboard", description="d", sort_order=2),
            CaseStudy(title="Study", slug="study-one", description="d", metrics=dump_json({"saved": "10h"})),
            NavigationItem(title="Blog", href="/blog"),
            SocialLink(platform="github", url="https://github.com/example"),
            SkillCategory(title="Backend", skills=dump_json([{"name": "Python", "proficiency": 90}])),
            Tool(name="n8n"),
            ExperienceEntry(
                title="Automation Engineer", company="Acme", period="2021 - Present", type="Full-time", category="ops"
            ),
            ContentSection(section_name="hero", content="Hi there"),
            ChatbotQuestion(question_text="What do you build?", category="services"),
            ChatbotKnowledge(title="Services", content="I build automation workflows."),
        ]
    )
    await session.commit()


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"success": True, "data": {"status": "ok"}}

    async def test_detailed_health(self, client: AsyncClient):
        data = (await client.get("/api/health/detailed")).json()["data"]
        assert data["status"] == "ok"
        assert data["database"]["status"] == "ok"
        assert "hit_rate" in data["cache"]

    async def test_version(self, client: AsyncClient):
        assert (await client.get("/api/version")).json()["data"]["name"] == "Portfolio CMS"


class TestBlog:
    async def test_list_published_newest_first(self, client: AsyncClient, content):
        response = await client.get("/api/blog")
        body = response.json()

        assert response.status_code == 200
        assert body["success"] is True
        assert [post["slug"] for post in body["data"]] == ["second-post", "first-post"]
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 2, "pages": 1}
        assert body["data"][0]["read_time"] == "1 min read"

    async def test_second_request_is_served_from_cache(self, client: AsyncClient, content):
        first = await client.get("/api/blog")
        second = await client.get("/api/blog")
        assert first.headers["X-Cache"] == "MISS"
        assert second.headers["X-Cache"] == "HIT"

    async def test_category_filter(self, client: AsyncClient, content):
        body = (await client.get("/api/blog", params={"category": "news"})).json()
        assert [post["slug"] for post in body["data"]] == ["first-post"]

    async def test_search_is_not_cached(self, client: AsyncClient, content):
        response = await client.get("/api/blog", params={"search": "python"})
        assert [post["slug"] for post in response.json()["data"]] == ["second-post"]
        assert "X-Cache" not in response.headers

    async def test_get_post(self, client: AsyncClient, content):
        data = (await client.get("/api/blog/second-post")).json()["data"]
        assert data["content"] == "Python automation tips"
        assert data["tags"] == ["python"]

    @pytest.mark.parametrize("slug", ["draft-post", "missing-post"])
    async def test_unpublished_or_missing_post(self, client: AsyncClient, content, slug: str):
        response = await client.get(f"/api/blog/{slug}")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Blog post not found"}

    async def test_invalid_pagination(self, client: AsyncClient):
        response = await client.get("/api/blog", params={"limit": 500})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid input data"


class TestProjects:
    async def test_list_projects(self, client: AsyncClient, content):
        body = (await client.get("/api/projects")).json()
        assert [project["slug"] for project in body["data"]] == ["invoice-bot", "dashboard"]
        assert [project["type"] for project in body["data"]] == ["workflow", "tool"]

    async def test_get_project_by_slug(self, client: AsyncClient, content):
        assert (await client.get("/api/projects/dashboard")).json()["data"]["title"] == "Dashboard"

    async def test_missing_project(self, client: AsyncClient):
        response = await client.get("/api/projects/nope")
        assert response.status_code == 404

    async def test_case_studies(self, client: AsyncClient, content):
        body = (await client.get("/api/case-studies")).json()
        assert body["data"][0]["metrics"] == {"saved": "10h"}
        assert (await client.get("/api/case-studies/study-one")).status_code == 200
        assert (await client.get("/api/case-studies/nope")).status_code == 404


class TestSite:
    @pytest.mark.parametrize(
        "path, field, expected",
        [
            ("/api/navigation", "title", "Blog"),
            ("/api/social-links", "platform", "github"),
            ("/api/skills", "title", "Backend"),
            ("/api/tools", "name", "n8n"),
            ("/api/experience", "company", "Acme"),
            ("/api/content?section=hero", "content", "Hi there"),
        ],
    )
    async def test_site_lists(self, client: AsyncClient, content, path: str, field: str, expected: str):
        data = (await client.get(path)).json()["data"]
        assert data[0][field] == expected


class TestSeo:
    async def test_robots(self, client: AsyncClient):
        response = await client.get("/robots.txt")
        assert response.status_code == 200
        assert "Disallow: /admin/" in response.text

    async def test_sitemap(self, client: AsyncClient, content):
        response = await client.get("/sitemap.xml")
        assert response.headers["content-type"].startswith("application/xml")
        assert "/blog/second-post</loc>" in response.text
        assert "draft-post" not in response.text


class TestChatbot:
    async def test_questions(self, client: AsyncClient, content):
        data = (await client.get("/api/chatbot/questions")).json()["data"]
        assert data[0]["question_text"] == "What do you build?"

    async def test_chat_from_knowledge_base(self, client: AsyncClient, content):
        response = await client.post("/api/chatbot/chat", json={"message": "Which services do you offer?"})
        data = response.json()["data"]

        assert response.status_code == 200
        assert data["response"] == "I build automation workflows."
        assert data["source"] == "knowledge_base"
        assert data["conversation_id"].startswith("conv_")

    async def test_empty_message_is_rejected(self, client: AsyncClient):
        response = await client.post("/api/chatbot/chat", json={"message": ""})
        assert response.status_code == 400


class TestNewsletter:
    async def test_embed_not_configured(self, client: AsyncClient):
        response = await client.get("/api/newsletter/embed")
        assert response.status_code == 404
        assert (await client.get("/api/newsletter/status")).json()["data"] == {"is_enabled": False}

    async def test_subscribe_not_configured(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "newsletter_subscribe_url", None)
        response = await client.post("/api/newsletter/subscribe", json={"email": "reader@example.com"})
        assert response.status_code == 503
        assert response.json()["success"] is False

    async def test_subscribe_invalid_email(self, client: AsyncClient):
        response = await client.post("/api/newsletter/subscribe", json={"email": "not-an-email"})
        assert response.status_code == 400


class TestContact:
    MESSAGE = {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "subject": "Automation project",
        "message": "I would like to automate our invoicing.",
    }

    async def test_form_config(self, client: AsyncClient):
        data = (await client.get("/api/contact")).json()["data"]
        assert data["required_fields"] == ["name", "email", "subject", "message"]
        assert data["max_message_length"] == 2000

    async def test_message_is_stored(self, client: AsyncClient, session: AsyncSession):
        response = await client.post("/api/contact", json=self.MESSAGE, headers={"User-Agent": "pytest-client"})

        assert response.status_code == 200
        assert response.json()["message"].startswith("Thank you for your message!")
        stored = (await session.execute(select(ContactMessage))).scalars().one()
        assert stored.subject == "Automation project"
        assert stored.user_agent == "pytest-client"

    async def test_spam_is_rejected(self, client: AsyncClient, session: AsyncSession):
        response = await client.post("/api/contact", json={**self.MESSAGE, "subject": "Casino bonus for you"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Message flagged as spam"}
        assert (await session.execute(select(ContactMessage))).scalars().first() is None

    @pytest.mark.parametrize(
        "field, value", [("email", "not-an-email"), ("message", "too short"), ("name", "J"), ("subject", None)]
    )
    async def test_invalid_fields(self, client: AsyncClient, field: str, value):
        response = await client.post("/api/contact", json={**self.MESSAGE, field: value})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid input data"


class TestSearch:
    async def test_results_across_types(self, client: AsyncClient, content):
        response = await client.get("/api/search", params={"q": "automation"})
        data = response.json()["data"]

        assert response.status_code == 200
        assert data["query"] == "automation"
        assert {item["type"] for item in data["results"]} == {"blog", "project", "experience"}
        assert {item["url"] for item in data["results"]} >= {"/blog/second-post", "/project/invoice-bot"}
        assert all(0 < item["relevance_score"] <= 1 for item in data["results"])

    @pytest.mark.parametrize("params", [{"q": "a"}, {}, {"q": "automation", "limit": 51}, {"q": "   "}])
    async def test_invalid_queries(self, client: AsyncClient, params):
        response = await client.get("/api/search", params=params)
        assert response.status_code == 400
