"""
Seed the database with the default admin and sample portfolio content.

Usage::

    python -m portfolio_cms.scripts.seed [--admin-only] [--reset]

Seeding is idempotent: rows are matched on their natural key (slug, title,
href, ...) and only missing ones are inserted. ``--reset`` drops and recreates
every table first.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any, Dict, List, Optional, Sequence, Type

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from portfolio_cms.core.database import async_session_maker, engine
from portfolio_cms.core.database.base import dump_json, utc_now
from portfolio_cms.core.database.entities import (
    BlogPost,
    CaseStudy,
    ChatbotKnowledge,
    ChatbotQuestion,
    ExperienceEntry,
    NavigationItem,
    Project,
    SkillCategory,
    SocialLink,
    Tool,
)
from portfolio_cms.core.database.repositories import SiteSettingRepository
from portfolio_cms.core.database.utils import create_all, drop_all
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.server.core.config import settings
from portfolio_cms.server.services.auth import create_default_admin
from portfolio_cms.server.services.content import SITE_SETTINGS_KEY

logger = get_logger(__name__)

NAVIGATION = [
    {"title": "About", "href": "#about", "is_section": True, "sort_order": 1},
    {"title": "Skills", "href": "#skills", "is_section": True, "sort_order": 2},
    {"title": "Projects", "href": "/projects", "is_section": False, "sort_order": 3},
    {"title": "Case Studies", "href": "/case-studies", "is_section": False, "sort_order": 4},
    {"title": "Blog", "href": "/blog", "is_section": False, "sort_order": 5},
    {"title": "Contact", "href": "/contact", "is_section": False, "sort_order": 6},
]

SOCIAL_LINKS = [
    {"platform": "GitHub", "url": "https://github.com/example", "sort_order": 1},
    {"platform": "LinkedIn", "url": "https://www.linkedin.com/in/example", "sort_order": 2},
]

SKILL_CATEGORIES = [
    {
        "title": "Backend",
        "description": "APIs, data and services",
        "color": "#3B82F6",
        "skills": dump_json([{"name": "Python", "proficiency": 95}, {"name": "PostgreSQL", "proficiency": 85}]),
        "sort_order": 1,
    },
    {
        "title": "Automation",
        "description": "Workflows and integrations",
        "color": "#10B981",
        "skills": dump_json([{"name": "n8n", "proficiency": 90}, {"name": "Zapier", "proficiency": 80}]),
        "sort_order": 2,
    },
]

TOOLS = [
    {"name": "FastAPI", "category": "Framework", "description": "Async Python web framework", "sort_order": 1},
    {"name": "Docker", "category": "DevOps", "description": "Container runtime", "sort_order": 2},
]

EXPERIENCE = [
    {
        "title": "Automation Engineer",
        "company": "Acme Logistics",
        "period": "2021 - Present",
        "type": "Full-time",
        "category": "automation",
        "achievements": dump_json(["Automated invoice processing", "Cut manual data entry by 80%"]),
        "metrics": "40 workflows in production",
        "sort_order": 1,
    },
    {
        "title": "Backend Developer",
        "company": "Northwind Studio",
        "period": "2018 - 2021",
        "type": "Full-time",
        "category": "development",
        "achievements": dump_json(["Built the public REST API", "Migrated reporting to PostgreSQL"]),
        "sort_order": 2,
    },
]

BLOG_POSTS = [
    {
        "title": "Welcome to the blog",
        "slug": "welcome-to-the-blog",
        "content": "This is the first post. Edit or delete it from the admin panel.",
        "excerpt": "The first post on this site.",
        "category": "News",
        "tags": dump_json(["announcement"]),
        "published": True,
    },
]

PROJECTS = [
    {
        "title": "Invoice Automation Workflow",
        "slug": "invoice-automation-workflow",
        "description": "Extracts invoice data from email attachments and files it in the accounting system.",
        "technologies": dump_json(["Python", "n8n", "OCR"]),
        "category": "Automation",
        "status": "Live",
        "sort_order": 1,
        "featured": True,
    },
]

CASE_STUDIES = [
    {
        "title": "Cutting Support Response Time",
        "slug": "cutting-support-response-time",
        "subtitle": "A triage assistant for a small support team",
        "description": "Automated ticket triage reduced the first response time from hours to minutes.",
        "metrics": dump_json({"response_time": "-85%", "tickets_per_week": "400"}),
        "results": dump_json(["Faster first response", "Less manual routing"]),
        "tools": dump_json(["Python", "OpenAI", "Zendesk"]),
        "timeline": dump_json([{"phase": "Discovery", "description": "Two weeks of ticket analysis"}]),
        "category": "AI",
        "challenge": "Tickets were routed by hand.",
        "solution": "A classifier assigns each ticket to the right queue with a suggested answer.",
        "sort_order": 1,
        "featured": True,
    },
]

KNOWLEDGE = [
    {
        "title": "Services",
        "content": "I build automation workflows, internal tools and AI assistants for small teams.",
        "category": "services",
        "tags": dump_json(["services", "automation"]),
        "priority": 5,
    },
    {
        "title": "Contact",
        "content": "The best way to reach me is through the contact page.",
        "category": "contact",
        "tags": dump_json(["contact", "email"]),
        "priority": 3,
    },
]

QUESTIONS = [
    {"question_text": "What services do you offer?", "icon": "briefcase", "category": "services", "sort_order": 1},
    {"question_text": "How can I contact you?", "icon": "mail", "category": "contact", "sort_order": 2},
]


async def ensure_rows(
    session: AsyncSession, model: Type[SQLModel], key: str, rows: Sequence[Dict[str, Any]]
) -> int:
    """Insert the rows whose ``key`` value is not stored yet; returns the number inserted."""
    column = getattr(model, key)
    result = await session.execute(select(column).where(column.in_([row[key] for row in rows])))
    existing = set(result.scalars().all())
    missing: List[SQLModel] = [model(**row) for row in rows if row[key] not in existing]
    for entity in missing:
        if isinstance(entity, BlogPost) and entity.published:
            entity.published_at = utc_now()
    session.add_all(missing)
    await session.commit()
    if missing:
        logger.info(f"Seeded {len(missing)} {model.__tablename__} rows")
    return len(missing)


async def seed_admin(session: AsyncSession) -> bool:
    if not settings.admin_email or not settings.admin_password:
        logger.error("ADMIN_EMAIL and ADMIN_PASSWORD must be set to create the admin account")
        return False
    user, _ = await create_default_admin(session, settings.admin_email, settings.admin_password, settings.admin_name)
    return user is not None


async def seed_content(session: AsyncSession) -> Dict[str, int]:
    counts = {
        "navigation_items": await ensure_rows(session, NavigationItem, "href", NAVIGATION),
        "social_links": await ensure_rows(session, SocialLink, "platform", SOCIAL_LINKS),
        "skill_categories": await ensure_rows(session, SkillCategory, "title", SKILL_CATEGORIES),
        "tools": await ensure_rows(session, Tool, "name", TOOLS),
        "experience_entries": await ensure_rows(session, ExperienceEntry, "title", EXPERIENCE),
        "blog_posts": await ensure_rows(session, BlogPost, "slug", BLOG_POSTS),
        "projects": await ensure_rows(session, Project, "slug", PROJECTS),
        "case_studies": await ensure_rows(session, CaseStudy, "slug", CASE_STUDIES),
        "chatbot_knowledge": await ensure_rows(session, ChatbotKnowledge, "title", KNOWLEDGE),
        "chatbot_questions": await ensure_rows(session, ChatbotQuestion, "question_text", QUESTIONS),
    }
    repo = SiteSettingRepository(session)
    if await repo.get_value(SITE_SETTINGS_KEY) is None:
        await repo.set_value(
            SITE_SETTINGS_KEY,
            {"site_name": settings.site_name, "site_description": "Portfolio and blog", "maintenance_mode": False},
        )
        counts["site_settings"] = 1
    return counts


async def run(admin_only: bool = False, reset: bool = False) -> int:
    if reset:
        logger.warning("Dropping all tables before seeding")
        await drop_all(engine)
    await create_all(engine)

    async with async_session_maker() as session:
        admin_ok = await seed_admin(session)
        if admin_only:
            return 0 if admin_ok else 1
        counts = await seed_content(session)

    logger.info(f"Seeding finished: {sum(counts.values())} rows inserted")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the portfolio database.")
    parser.add_argument("--admin-only", action="store_true", help="Only create the default admin account")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    args = parser.parse_args(argv)
    return asyncio.run(run(admin_only=args.admin_only, reset=args.reset))


if __name__ == "__main__":
    sys.exit(main())
