"""Admin site settings and newsletter configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.cache.invalidation import invalidate_site_cache
from portfolio_cms.core.database import get_session
from portfolio_cms.core.database.repositories import SiteSettingRepository
from portfolio_cms.core.models.io.common import ApiResponse
from portfolio_cms.core.models.io.site import NewsletterSettingsPayload, NewsletterSettingsRead, SiteSettingsPayload
from portfolio_cms.server.services import newsletter as newsletter_service
from portfolio_cms.server.services.audit import record_admin_action
from portfolio_cms.server.services.content import SITE_SETTINGS_KEY, ContentService

router = APIRouter(tags=["admin-settings"])
newsletter_router = APIRouter(tags=["admin-newsletter"])


@router.get(
    "",
    response_model=ApiResponse[SiteSettingsPayload],
    summary="Get Site Settings",
    description="Return the stored site settings merged over the defaults.",
)
async def get_settings(session: AsyncSession = Depends(get_session)) -> ApiResponse[SiteSettingsPayload]:
    values = await ContentService(session).get_site_settings()
    return ApiResponse[SiteSettingsPayload](data=SiteSettingsPayload.model_validate(values))


@router.put(
    "",
    response_model=ApiResponse[SiteSettingsPayload],
    summary="Update Site Settings",
    responses={400: {"description": "Invalid settings"}},
)
async def update_settings(
    request: Request,
    payload: SiteSettingsPayload,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[SiteSettingsPayload]:
    """
    Replace the site settings.

    - **site_name**: Name shown in titles and meta tags.
    - **maintenance_mode**: Serve the maintenance page for public pages.
    """
    await SiteSettingRepository(session).set_value(SITE_SETTINGS_KEY, payload.model_dump(mode="json"))
    invalidate_site_cache()
    await record_admin_action(
        session,
        request,
        "update",
        "site_settings",
        SITE_SETTINGS_KEY,
        details={"maintenance_mode": payload.maintenance_mode},
    )
    return ApiResponse[SiteSettingsPayload](message="Settings saved successfully", data=payload)


@newsletter_router.get("", response_model=ApiResponse[NewsletterSettingsRead], summary="Get Newsletter Settings")
async def get_newsletter(session: AsyncSession = Depends(get_session)) -> ApiResponse[NewsletterSettingsRead]:
    return ApiResponse[NewsletterSettingsRead](data=await newsletter_service.get_config(session))


@newsletter_router.put(
    "",
    response_model=ApiResponse[NewsletterSettingsRead],
    summary="Update Newsletter Settings",
    description="Store the provider embed code and optional attribution snippet.",
)
async def update_newsletter(
    request: Request,
    payload: NewsletterSettingsPayload,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[NewsletterSettingsRead]:
    config = await newsletter_service.save_config(session, payload)
    invalidate_site_cache()
    await record_admin_action(
        session, request, "update", "newsletter_settings", details={"is_enabled": payload.is_enabled}
    )
    return ApiResponse[NewsletterSettingsRead](message="Newsletter settings saved successfully", data=config)
