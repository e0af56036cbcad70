"""``sitemap.xml`` and ``robots.txt``."""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.server.core.config import settings
from portfolio_cms.server.services.seo import build_robots, build_sitemap

router = APIRouter(tags=["seo"])


@router.get("/sitemap.xml", summary="Sitemap", response_class=Response)
async def sitemap(session: AsyncSession = Depends(get_session)) -> Response:
    """Static pages plus every published post, case study and project."""
    body = await build_sitemap(session, settings.site_base_url)
    return Response(content=body, media_type="application/xml", headers={"Cache-Control": "public, max-age=3600"})


@router.get("/robots.txt", summary="Robots", response_class=PlainTextResponse)
async def robots() -> PlainTextResponse:
    return PlainTextResponse(build_robots(settings.site_base_url), headers={"Cache-Control": "public, max-age=86400"})
