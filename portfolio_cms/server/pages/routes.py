"""
Server-rendered public pages and the admin shell pages.

Public pages read through :class:`ContentService`, so they share the cached
query results with the JSON API. When the ``maintenance_mode`` site setting is
on, public pages answer 503 with the maintenance page; admin pages stay
reachable.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.server.core.config import settings
from portfolio_cms.server.services.content import ContentService
from portfolio_cms.server.services.seo import PageMeta, article_meta, page_meta

logger = get_logger(__name__)

PAGES_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(PAGES_DIR / "templates"))

BLOG_PAGE_SIZE = 9
PROJECTS_PAGE_SIZE = 12

router = APIRouter(include_in_schema=False)


class PageContext:
    """Site-wide values shared by every public template."""

    def __init__(self, request: Request, service: ContentService, site: Dict[str, Any]) -> None:
        self.request = request
        self.service = service
        self.site = site

    @property
    def site_name(self) -> str:
        return self.site.get("site_name") or settings.site_name

    @property
    def maintenance(self) -> bool:
        return bool(self.site.get("maintenance_mode"))

    def meta(
        self, path: str, title: Optional[str] = None, description: Optional[str] = None, image: Optional[str] = None
    ) -> PageMeta:
        return page_meta(
            self.site_name,
            settings.site_base_url,
            path,
            title=title,
            description=description or self.site.get("site_description") or "",
            image=image,
        )

    async def render(self, template: str, meta: PageMeta, status_code: int = status.HTTP_200_OK, **context: Any):
        values = {
            "site": self.site,
            "site_name": self.site_name,
            "meta": meta,
            "navigation": await self.service.get_navigation(),
            "social_links": await self.service.get_social_links(),
            **context,
        }
        return templates.TemplateResponse(self.request, template, values, status_code=status_code)

    async def not_found(self, what: str = "Page"):
        meta = self.meta(self.request.url.path, title="Not Found")
        return await self.render("not_found.html", meta, status.HTTP_404_NOT_FOUND, what=what)

    def maintenance_page(self):
        meta = self.meta(self.request.url.path, title="Under Maintenance")
        return templates.TemplateResponse(
            self.request,
            "maintenance.html",
            {"site": self.site, "site_name": self.site_name, "meta": meta},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


async def get_page_context(request: Request, session: AsyncSession = Depends(get_session)) -> PageContext:
    service = ContentService(session)
    return PageContext(request, service, await service.get_site_settings())


# =====================================================================
# Public pages
# =====================================================================


@router.get("/", response_class=HTMLResponse)
async def home(ctx: PageContext = Depends(get_page_context)):
    if ctx.maintenance:
        return ctx.maintenance_page()
    service = ctx.service
    projects = await service.get_projects(page=1, limit=6)
    return await ctx.render(
        "home.html",
        ctx.meta("/"),
        sections={section["section_name"]: section for section in await service.get_content_sections()},
        skills=await service.get_skills(),
        tools=await service.get_tools(),
        experience=await service.get_experience(),
        recent_posts=await service.get_recent_posts(3),
        projects=projects["projects"],
        case_studies=await service.get_case_studies(3),
    )


@router.get("/blog", response_class=HTMLResponse)
async def blog_list(
    page: int = Query(1, ge=1),
    category: Optional[str] = Query(None, max_length=100),
    ctx: PageContext = Depends(get_page_context),
):
    if ctx.maintenance:
        return ctx.maintenance_page()
    result = await ctx.service.get_blog_posts(page=page, limit=BLOG_PAGE_SIZE, category=category)
    return await ctx.render(
        "blog_list.html",
        ctx.meta("/blog", title="Blog"),
        posts=result["posts"],
        pagination=result["pagination"],
        category=category,
    )


@router.get("/blog/{slug}", response_class=HTMLResponse)
async def blog_post(slug: str, ctx: PageContext = Depends(get_page_context)):
    if ctx.maintenance:
        return ctx.maintenance_page()
    post = await ctx.service.get_blog_post(slug)
    if post is None:
        return await ctx.not_found("Blog post")
    meta = article_meta(ctx.site_name, settings.site_base_url, post)
    return await ctx.render(
        "blog_post.html", meta, post=post, recent_posts=await ctx.service.get_recent_posts(3)
    )


@router.get("/projects", response_class=HTMLResponse)
async def projects_list(
    page: int = Query(1, ge=1),
    category: Optional[str] = Query(None, max_length=100),
    ctx: PageContext = Depends(get_page_context),
):
    if ctx.maintenance:
        return ctx.maintenance_page()
    result = await ctx.service.get_projects(page=page, limit=PROJECTS_PAGE_SIZE, category=category)
    return await ctx.render(
        "projects.html",
        ctx.meta("/projects", title="Projects"),
        projects=result["projects"],
        pagination=result["pagination"],
        category=category,
    )


@router.get("/project/{slug}", response_class=HTMLResponse)
async def project_detail(slug: str, ctx: PageContext = Depends(get_page_context)):
    if ctx.maintenance:
        return ctx.maintenance_page()
    project = await ctx.service.get_project(slug)
    if project is None:
        return await ctx.not_found("Project")
    meta = ctx.meta(
        f"/project/{project['slug']}", title=project["title"], description=project["description"], image=project["image"]
    )
    return await ctx.render("project.html", meta, project=project)


@router.get("/case-studies", response_class=HTMLResponse)
async def case_studies_list(ctx: PageContext = Depends(get_page_context)):
    if ctx.maintenance:
        return ctx.maintenance_page()
    return await ctx.render(
        "case_studies.html",
        ctx.meta("/case-studies", title="Case Studies"),
        case_studies=await ctx.service.get_case_studies(50),
    )


@router.get("/case-study/{slug}", response_class=HTMLResponse)
async def case_study_detail(slug: str, ctx: PageContext = Depends(get_page_context)):
    if ctx.maintenance:
        return ctx.maintenance_page()
    case_study = await ctx.service.get_case_study(slug)
    if case_study is None:
        return await ctx.not_found("Case study")
    meta = ctx.meta(
        f"/case-study/{case_study['slug']}",
        title=case_study["title"],
        description=case_study["description"],
        image=case_study["image"],
    )
    meta.og_type = "article"
    return await ctx.render("case_study.html", meta, case_study=case_study)


@router.get("/contact", response_class=HTMLResponse)
async def contact(ctx: PageContext = Depends(get_page_context)):
    if ctx.maintenance:
        return ctx.maintenance_page()
    return await ctx.render("contact.html", ctx.meta("/contact", title="Contact"))


# =====================================================================
# Admin shell pages (data is loaded from the admin API)
# =====================================================================


@router.get("/admin/login", response_class=HTMLResponse)
async def admin_login(ctx: PageContext = Depends(get_page_context)):
    return await ctx.render("admin_login.html", ctx.meta("/admin/login", title="Admin Login"))


@router.get("/admin", response_class=HTMLResponse)
async def admin_dashboard(ctx: PageContext = Depends(get_page_context)):
    admin = getattr(ctx.request.state, "admin", None)
    return await ctx.render(
        "admin_dashboard.html",
        ctx.meta("/admin", title="Dashboard"),
        admin=admin,
        stats=await ctx.service.get_analytics(),
    )
