from __future__ import annotations

import json
from xml.etree import ElementTree

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database.entities import BlogPost, CaseStudy, Project
from portfolio_cms.server.services.seo import (
    SITEMAP_NAMESPACE,
    absolute_url,
    article_meta,
    build_robots,
    build_sitemap,
    page_meta,
)

BASE = "https://example.com/"


def test_robots_blocks_admin_and_ai_crawlers():
    robots = build_robots(BASE)

    assert robots.startswith("User-agent: *\n")
    assert "Disallow: /admin/" in robots
    assert "Disallow: /api/" in robots
    assert "User-agent: GPTBot\nDisallow: /" in robots
    assert "Sitemap: https://example.com/sitemap.xml" in robots


async def test_sitemap_lists_static_and_published_pages(session: AsyncSession):
    session.add_all(
        [
            BlogPost(title="Live", slug="live-post", content="x", published=True),
            BlogPost(title="Draft", slug="draft-post", content="x"),
            CaseStudy(title="Study", slug="study-one", description="d"),
            Project(title="Bot", slug="bot-project", description="d"),
            Project(title="Gone", slug="gone-project", description="d", is_active=False),
        ]
    )
    await session.commit()

    xml = await build_sitemap(session, BASE)
    root = ElementTree.fromstring(xml.split("\n", 1)[1])
    locs = [node.text for node in root.iter(f"{{{SITEMAP_NAMESPACE}}}loc")]

    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert locs[0] == "https://example.com"
    assert "https://example.com/blog/live-post" in locs
    assert "https://example.com/case-study/study-one" in locs
    assert "https://example.com/project/bot-project" in locs
    assert "https://example.com/blog/draft-post" not in locs
    assert "https://example.com/project/gone-project" not in locs


def test_absolute_url():
    assert absolute_url(BASE, "/img/a.png") == "https://example.com/img/a.png"
    assert absolute_url(BASE, "https://cdn.example.com/a.png") == "https://cdn.example.com/a.png"
    assert absolute_url(BASE, None) is None


def test_page_meta_title():
    assert page_meta("Site", BASE, "/blog", title="Blog").title == "Blog | Site"
    assert page_meta("Site", BASE, "/").title == "Site"


def test_article_meta_has_json_ld():
    post = {
        "slug": "hello",
        "title": "Hello </script>",
        "excerpt": "Short",
        "image": "/uploads/images/a.png",
        "published_at": "2024-03-05T10:00:00",
        "author": "Admin",
        "tags": ["python", "ai"],
    }

    meta = article_meta("Site", BASE, post)

    assert meta.og_type == "article"
    assert meta.url == "https://example.com/blog/hello"
    assert meta.image == "https://example.com/uploads/images/a.png"
    assert "</script>" not in meta.json_ld
    data = json.loads(meta.json_ld)
    assert data["@type"] == "BlogPosting"
    assert data["headline"] == "Hello </script>"
    assert data["keywords"] == "python, ai"
