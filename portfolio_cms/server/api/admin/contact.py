"""
Admin inbox for contact form messages.

Messages are listed newest first, can be marked read or unread and are
soft-deleted. Every change is written to the audit log.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.common import ApiResponse, MessageResponse, PaginatedResponse, Pagination
from portfolio_cms.core.models.io.contact import ContactMessageRead, ContactMessageUpdate
from portfolio_cms.server.services.audit import record_admin_action
from portfolio_cms.server.services.contact import ContactService

logger = get_logger(__name__)

router = APIRouter(tags=["admin-contact"])


@router.get(
    "",
    response_model=PaginatedResponse[ContactMessageRead],
    summary="List Contact Messages",
    description="Contact messages newest first, optionally only unread ones or those matching ``search``.",
)
async def list_messages(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False),
    search: Optional[str] = Query(None, max_length=200),
    session: AsyncSession = Depends(get_session),
) -> PaginatedResponse[ContactMessageRead]:
    filters = {"is_read": False} if unread_only else None
    items, total = await ContactService(session).repo.paginate(page, limit, filters, search)
    return PaginatedResponse[ContactMessageRead](
        data=[ContactMessageRead.model_validate(item) for item in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/unread-count", summary="Count Unread Messages")
async def unread_count(session: AsyncSession = Depends(get_session)):
    return {"success": True, "data": {"unread": await ContactService(session).unread_count()}}


@router.get(
    "/{message_id}",
    response_model=ApiResponse[ContactMessageRead],
    summary="Get Contact Message",
    responses={404: {"description": "Message not found"}},
)
async def get_message(message_id: str, session: AsyncSession = Depends(get_session)) -> ApiResponse[ContactMessageRead]:
    entity = await ContactService(session).repo.get_by_id(message_id)
    if entity is None or not entity.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
    return ApiResponse[ContactMessageRead](data=ContactMessageRead.model_validate(entity))


@router.patch(
    "/{message_id}",
    response_model=ApiResponse[ContactMessageRead],
    summary="Mark Contact Message Read",
    responses={404: {"description": "Message not found"}},
)
async def update_message(
    request: Request,
    message_id: str,
    payload: ContactMessageUpdate,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[ContactMessageRead]:
    entity = await ContactService(session).mark_read(message_id, payload.is_read)
    if entity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
    await record_admin_action(
        session, request, "update", "contact_message", message_id, details={"is_read": payload.is_read}
    )
    return ApiResponse[ContactMessageRead](message="Message updated", data=ContactMessageRead.model_validate(entity))


@router.delete(
    "/{message_id}",
    response_model=MessageResponse,
    summary="Delete Contact Message",
    responses={404: {"description": "Message not found"}},
)
async def delete_message(
    request: Request, message_id: str, session: AsyncSession = Depends(get_session)
) -> MessageResponse:
    entity = await ContactService(session).repo.soft_delete(message_id)
    if entity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
    await record_admin_action(session, request, "delete", "contact_message", message_id)
    logger.info(f"Deleted contact message {message_id}")
    return MessageResponse(message="Message deleted successfully")
