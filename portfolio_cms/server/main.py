"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging, admin authentication, response caching), registers the
exception handlers and includes the public, admin and page routers.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from portfolio_cms.core.database import async_session_maker, init_db
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.monitoring import initialize_logfire

from .api.admin import audit, auth, backup, blog as admin_blog, cache, chatbot as admin_chatbot
from .api.admin import contact as admin_contact, content, security, settings as admin_settings, stats, upload
from .api.public import blog, chatbot, contact, health, newsletter, projects, search, seo, site
from .core import constant
from .core.config import settings
from .core.rate_limit import limiter
from .exception_handlers import setup_exception_handlers
from .middleware import AdminAuthMiddleware, RequestLoggingMiddleware, ResponseCacheMiddleware
from .pages import routes as pages
from .services.auth import create_default_admin
from .services.deps import get_current_admin

logger = get_logger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "pages" / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates missing tables and the default admin account on startup.
    """
    # Startup
    try:
        logger.info("Starting up Portfolio CMS...")
        await init_db()
        logger.info("Database initialized successfully")
        if settings.admin_email and settings.admin_password:
            async with async_session_maker() as session:
                await create_default_admin(session, settings.admin_email, settings.admin_password, settings.admin_name)
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down Portfolio CMS...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Portfolio CMS API

    Public content API for the portfolio website (blog, projects, case studies,
    site structure, search, contact form, chatbot and newsletter) and the admin API
    behind the CMS panel.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)

app.state.limiter = limiter
setup_exception_handlers(app)

# Middleware added last runs first: CORS -> request logging -> admin auth -> response cache
app.add_middleware(ResponseCacheMiddleware, enabled=settings.cache_enabled)
app.add_middleware(AdminAuthMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
)

# Public API
api = constant.API_PREFIX
app.include_router(health.router, prefix=api, tags=["health"])
app.include_router(blog.router, prefix=f"{api}/blog")
app.include_router(projects.router, prefix=f"{api}/projects")
app.include_router(projects.case_studies_router, prefix=f"{api}/case-studies")
app.include_router(site.router, prefix=api)
app.include_router(chatbot.router, prefix=f"{api}/chatbot")
app.include_router(newsletter.router, prefix=f"{api}/newsletter")
app.include_router(contact.router, prefix=f"{api}/contact")
app.include_router(search.router, prefix=f"{api}/search")
app.include_router(seo.router)

# Admin API
admin = constant.ADMIN_API_PREFIX
protected = [Depends(get_current_admin)]
app.include_router(auth.router, prefix=f"{admin}/auth")
for router, path in (
    (admin_blog.router, "blog"),
    (content.projects_router, "projects"),
    (content.case_studies_router, "case-studies"),
    (content.skills_router, "skills"),
    (content.tools_router, "tools"),
    (content.experience_router, "experience"),
    (content.navigation_router, "navigation"),
    (content.social_links_router, "social-links"),
    (content.content_router, "content"),
    (content.knowledge_router, "chatbot/knowledge"),
    (content.questions_router, "chatbot/questions"),
    (admin_chatbot.router, "chatbot"),
    (admin_settings.router, "settings"),
    (admin_settings.newsletter_router, "newsletter"),
    (admin_contact.router, "contact"),
    (upload.router, "upload"),
    (backup.router, "backup"),
    (audit.router, "audit"),
    (security.router, "security/two-factor"),
    (cache.router, "cache"),
    (stats.router, "stats"),
):
    app.include_router(router, prefix=f"{admin}/{path}", dependencies=protected)

# Files and pages
Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
app.include_router(pages.router)
