"""
Newsletter integration.

The embed code of the newsletter provider (Beehiiv or compatible) is stored in
the ``newsletter`` site setting. Subscriptions posted to the site are relayed
server-side to the provider's form endpoint.
"""

from __future__ import annotations

from typing import Optional

import httpx
from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database.base import utc_now
from portfolio_cms.core.database.repositories import SiteSettingRepository
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.site import NewsletterSettingsPayload, NewsletterSettingsRead
from portfolio_cms.server.core.config import settings

logger = get_logger(__name__)

NEWSLETTER_SETTINGS_KEY = "newsletter"
SUBSCRIBE_TIMEOUT_SECONDS = 10.0


class NewsletterError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NewsletterNotConfigured(NewsletterError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class NewsletterSubscriptionError(NewsletterError):
    status_code = status.HTTP_502_BAD_GATEWAY


async def get_config(session: AsyncSession) -> NewsletterSettingsRead:
    stored = await SiteSettingRepository(session).get_value(NEWSLETTER_SETTINGS_KEY) or {}
    embed_code = stored.get("embed_code") or None
    return NewsletterSettingsRead(
        embed_code=embed_code,
        attribution_code=stored.get("attribution_code") or "",
        is_enabled=bool(embed_code) and bool(stored.get("is_enabled", True)),
        configured=bool(embed_code),
        updated_at=stored.get("updated_at"),
    )


async def save_config(session: AsyncSession, payload: NewsletterSettingsPayload) -> NewsletterSettingsRead:
    value = {
        "embed_code": payload.embed_code.strip(),
        "attribution_code": (payload.attribution_code or "").strip(),
        "is_enabled": payload.is_enabled,
        "updated_at": utc_now().isoformat(),
    }
    await SiteSettingRepository(session).set_value(NEWSLETTER_SETTINGS_KEY, value)
    logger.info("Newsletter settings saved")
    return await get_config(session)


async def subscribe(email: str, http_client: Optional[httpx.AsyncClient] = None) -> None:
    """
    Relay a subscription to the provider form endpoint.

    The provider answers a successful form post with 2xx or a redirect.

    Raises:
        NewsletterNotConfigured: No subscribe URL is configured.
        NewsletterSubscriptionError: The provider rejected the request or was unreachable.
    """
    url = settings.newsletter_subscribe_url
    if not url:
        raise NewsletterNotConfigured("Newsletter subscriptions are not configured")

    headers = {"Referer": settings.site_base_url}
    try:
        if http_client is not None:
            response = await http_client.post(url, data={"email": email}, headers=headers, follow_redirects=False)
        else:
            async with httpx.AsyncClient(timeout=SUBSCRIBE_TIMEOUT_SECONDS) as client:
                response = await client.post(url, data={"email": email}, headers=headers, follow_redirects=False)
    except httpx.HTTPError as e:
        logger.error(f"Newsletter provider unreachable: {e}")
        raise NewsletterSubscriptionError("Subscription failed. Please try again.") from e

    if response.is_success or response.status_code in (301, 302, 303):
        logger.info("Newsletter subscription relayed")
        return
    logger.error(f"Newsletter provider rejected subscription: HTTP {response.status_code}")
    raise NewsletterSubscriptionError("Subscription failed. Please try again.")
