"""
Search-engine metadata.

Builds ``sitemap.xml`` and ``robots.txt`` and the OpenGraph / Twitter / JSON-LD
metadata rendered into the public page templates.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from xml.etree import ElementTree

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database.base import utc_now
from portfolio_cms.core.database.repositories import BlogPostRepository, CaseStudyRepository, ProjectRepository

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

# path, change frequency, priority
STATIC_PAGES: Tuple[Tuple[str, str, float], ...] = (
    ("", "weekly", 1.0),
    ("/projects", "weekly", 0.9),
    ("/blog", "daily", 0.9),
    ("/case-studies", "monthly", 0.8),
    ("/contact", "yearly", 0.5),
)

ROBOTS_ALLOW = ("/", "/blog/", "/projects/", "/case-studies/", "/project/", "/case-study/")
ROBOTS_DISALLOW = ("/admin/", "/api/", "/private/", "*.json", "/uploads/temp/", "/temp/")
BLOCKED_CRAWLERS = ("GPTBot", "ChatGPT-User", "CCBot", "anthropic-ai")


@dataclass
class SitemapEntry:
    loc: str
    lastmod: datetime
    changefreq: str
    priority: float


async def sitemap_entries(session: AsyncSession, base_url: str) -> List[SitemapEntry]:
    """Static pages followed by every published post, case study and project."""
    base_url = base_url.rstrip("/")
    now = utc_now()
    entries = [SitemapEntry(f"{base_url}{path}", now, freq, priority) for path, freq, priority in STATIC_PAGES]

    posts, _ = await BlogPostRepository(session).list_published(page=1, limit=1000)
    entries.extend(SitemapEntry(f"{base_url}/blog/{post.slug}", post.updated_at, "monthly", 0.7) for post in posts)
    case_studies = await CaseStudyRepository(session).list(limit=1000)
    entries.extend(
        SitemapEntry(f"{base_url}/case-study/{item.slug}", item.updated_at, "monthly", 0.7) for item in case_studies
    )
    projects = await ProjectRepository(session).list(limit=1000)
    entries.extend(SitemapEntry(f"{base_url}/project/{item.slug}", item.updated_at, "monthly", 0.6) for item in projects)
    return entries


async def build_sitemap(session: AsyncSession, base_url: str) -> str:
    urlset = ElementTree.Element("urlset", xmlns=SITEMAP_NAMESPACE)
    for entry in await sitemap_entries(session, base_url):
        url = ElementTree.SubElement(urlset, "url")
        ElementTree.SubElement(url, "loc").text = entry.loc
        ElementTree.SubElement(url, "lastmod").text = entry.lastmod.date().isoformat()
        ElementTree.SubElement(url, "changefreq").text = entry.changefreq
        ElementTree.SubElement(url, "priority").text = f"{entry.priority:.1f}"
    body = ElementTree.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def build_robots(base_url: str) -> str:
    base_url = base_url.rstrip("/")
    lines = ["User-agent: *"]
    lines.extend(f"Allow: {path}" for path in ROBOTS_ALLOW)
    lines.extend(f"Disallow: {path}" for path in ROBOTS_DISALLOW)
    for crawler in BLOCKED_CRAWLERS:
        lines.extend(["", f"User-agent: {crawler}", "Disallow: /"])
    lines.extend(["", f"Host: {base_url}", f"Sitemap: {base_url}/sitemap.xml", ""])
    return "\n".join(lines)


@dataclass
class PageMeta:
    """Values rendered into ``<head>`` by the base template."""

    title: str
    description: str
    url: str
    image: Optional[str] = None
    og_type: str = "website"
    published_time: Optional[str] = None
    author: Optional[str] = None
    json_ld: Optional[str] = None


def absolute_url(base_url: str, path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def page_meta(
    site_name: str,
    base_url: str,
    path: str,
    title: Optional[str] = None,
    description: str = "",
    image: Optional[str] = None,
) -> PageMeta:
    full_title = f"{title} | {site_name}" if title else site_name
    return PageMeta(
        title=full_title,
        description=description,
        url=absolute_url(base_url, path) or base_url,
        image=absolute_url(base_url, image),
    )


def article_meta(site_name: str, base_url: str, post: Dict[str, Any]) -> PageMeta:
    """Meta tags and JSON-LD ``BlogPosting`` for a public blog post dict."""
    meta = page_meta(
        site_name,
        base_url,
        f"/blog/{post['slug']}",
        title=post.get("meta_title") or post["title"],
        description=post.get("meta_description") or post["excerpt"],
        image=post.get("image"),
    )
    meta.og_type = "article"
    meta.published_time = post.get("published_at")
    meta.author = post.get("author")
    meta.json_ld = article_json_ld(post, meta.url, meta.image, site_name)
    return meta


def article_json_ld(post: Dict[str, Any], url: str, image: Optional[str], publisher: str) -> str:
    data = {
        "@context": "https://schema.org",
        "@type": "BlogPosting",
        "headline": post["title"],
        "description": post.get("excerpt", ""),
        "datePublished": post.get("published_at") or post.get("date"),
        "author": {"@type": "Person", "name": post.get("author")},
        "publisher": {"@type": "Organization", "name": publisher},
        "mainEntityOfPage": url,
        "keywords": ", ".join(post.get("tags") or []),
    }
    if image:
        data["image"] = image
    # "</" must not appear inside a script element
    return json.dumps(data).replace("</", "<\\/")
