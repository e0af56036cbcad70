"""Public contact form endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.models.io.common import ApiResponse, MessageResponse
from portfolio_cms.core.models.io.contact import ContactFormConfig, ContactRequest
from portfolio_cms.server.core.config import settings
from portfolio_cms.server.core.rate_limit import limiter
from portfolio_cms.server.services.contact import ContactError, ContactService
from portfolio_cms.server.services.deps import client_ip

router = APIRouter(tags=["contact"])


@router.get(
    "",
    response_model=ApiResponse[ContactFormConfig],
    summary="Get Contact Form Configuration",
    description="Field requirements and limits for rendering the contact form.",
)
async def get_form_config() -> ApiResponse[ContactFormConfig]:
    return ApiResponse[ContactFormConfig](data=ContactFormConfig())


@router.post(
    "",
    response_model=MessageResponse,
    summary="Send Contact Message",
    description="Validate and store a message from the contact form.",
    responses={
        400: {"description": "Invalid input or message flagged as spam"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(settings.contact_rate_limit)
async def send_message(
    request: Request,
    payload: ContactRequest,
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    """
    Send a message.

    - **name**, **email**, **subject**, **message**: required
    - **company**, **phone**: optional
    """
    try:
        await ContactService(session).submit(
            payload,
            ip_address=client_ip(request),
            user_agent=request.headers.get("User-Agent"),
        )
    except ContactError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    return MessageResponse(message="Thank you for your message! I will get back to you within 24 hours.")
