"""Public newsletter endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.models.io.common import MessageResponse
from portfolio_cms.core.models.io.site import NewsletterSubscribeRequest
from portfolio_cms.server.core.config import settings
from portfolio_cms.server.core.rate_limit import limiter
from portfolio_cms.server.services import newsletter as newsletter_service

router = APIRouter(tags=["newsletter"])


@router.get(
    "/embed",
    summary="Get Newsletter Embed Code",
    description="Return the configured newsletter embed and attribution snippets.",
    responses={404: {"description": "Newsletter not configured"}},
)
async def get_embed(session: AsyncSession = Depends(get_session)):
    config = await newsletter_service.get_config(session)
    if not config.configured:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Newsletter settings not configured")
    return {
        "success": True,
        "data": {"embed_code": config.embed_code, "attribution_code": config.attribution_code or ""},
    }


@router.get(
    "/status",
    summary="Get Newsletter Status",
    description="Whether the newsletter sign-up should be shown on the site.",
)
async def get_status(session: AsyncSession = Depends(get_session)):
    config = await newsletter_service.get_config(session)
    return {"success": True, "data": {"is_enabled": config.is_enabled}}


@router.post(
    "/subscribe",
    response_model=MessageResponse,
    summary="Subscribe to Newsletter",
    description="Relay an email address to the newsletter provider.",
    responses={
        400: {"description": "Invalid email address"},
        429: {"description": "Rate limit exceeded"},
        502: {"description": "Provider rejected the subscription"},
        503: {"description": "Subscriptions not configured"},
    },
)
@limiter.limit(settings.newsletter_rate_limit)
async def subscribe(request: Request, payload: NewsletterSubscribeRequest) -> MessageResponse:
    """
    Subscribe an email address.

    - **email**: Address to subscribe; the provider sends its own confirmation email.
    """
    try:
        await newsletter_service.subscribe(payload.email)
    except newsletter_service.NewsletterError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    return MessageResponse(
        message="Successfully subscribed! Please check your email to confirm your subscription."
    )
