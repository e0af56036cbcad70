"""
Admin chatbot settings and conversation history.

The OpenAI key is write-only: reads expose whether a key is stored and a
masked preview, never the key itself.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.cache.invalidation import invalidate_chatbot_cache
from portfolio_cms.core.database import get_session
from portfolio_cms.core.database.entities.chatbot import ChatbotSettings
from portfolio_cms.core.database.repositories import ChatbotConversationRepository, ChatbotSettingsRepository
from portfolio_cms.core.models.io.chatbot import (
    ChatbotConversationRead,
    ChatbotSettingsRead,
    ChatbotSettingsUpdate,
)
from portfolio_cms.core.models.io.common import ApiResponse, MessageResponse, PaginatedResponse, Pagination
from portfolio_cms.server.services.audit import record_admin_action

router = APIRouter(tags=["admin-chatbot"])


def mask_api_key(key: Optional[str]) -> Optional[str]:
    """Keep the first 3 and last 4 characters of a key."""
    if not key:
        return None
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:3]}...{key[-4:]}"


def settings_read(config: Optional[ChatbotSettings]) -> ChatbotSettingsRead:
    if config is None:
        return ChatbotSettingsRead()
    return ChatbotSettingsRead(
        id=config.id,
        has_api_key=bool(config.openai_api_key),
        api_key_preview=mask_api_key(config.openai_api_key),
        model_name=config.model_name,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        system_prompt=config.system_prompt,
        is_active=config.is_active,
        fallback_enabled=config.fallback_enabled,
        cost_limit=config.cost_limit,
        updated_at=config.updated_at,
    )


@router.get("/settings", response_model=ApiResponse[ChatbotSettingsRead], summary="Get Chatbot Settings")
async def get_chatbot_settings(session: AsyncSession = Depends(get_session)) -> ApiResponse[ChatbotSettingsRead]:
    config = await ChatbotSettingsRepository(session).get_current()
    return ApiResponse[ChatbotSettingsRead](data=settings_read(config))


@router.put(
    "/settings",
    response_model=ApiResponse[ChatbotSettingsRead],
    summary="Save Chatbot Settings",
    description="Create or update the chatbot settings. Omitting the API key keeps the stored one.",
)
async def save_chatbot_settings(
    request: Request,
    payload: ChatbotSettingsUpdate,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[ChatbotSettingsRead]:
    """
    Upsert the chatbot configuration.

    - **openai_api_key**: New key; omit it to keep the current one, send an empty string to remove it.
    - **model_name**: Completion model, e.g. ``gpt-4o-mini``.
    - **fallback_enabled**: Answer from the knowledge base when the LLM call fails.
    """
    repo = ChatbotSettingsRepository(session)
    config = await repo.get_current()
    values = payload.model_dump(exclude={"openai_api_key"})
    if payload.openai_api_key is not None:
        values["openai_api_key"] = payload.openai_api_key.strip() or None

    if config is None:
        config = await repo.create(ChatbotSettings(**values))
        action = "create"
    else:
        config = await repo.apply_changes(config, values)
        action = "update"

    invalidate_chatbot_cache()
    await record_admin_action(
        session,
        request,
        action,
        "chatbot_settings",
        config.id,
        details={"api_key_changed": payload.openai_api_key is not None, "is_active": config.is_active},
        severity="warning" if payload.openai_api_key is not None else "info",
    )
    return ApiResponse[ChatbotSettingsRead](message="Chatbot settings saved successfully", data=settings_read(config))


@router.delete(
    "/settings",
    response_model=MessageResponse,
    summary="Deactivate Chatbot AI",
    responses={404: {"description": "No chatbot settings stored"}},
)
async def deactivate_chatbot_settings(request: Request, session: AsyncSession = Depends(get_session)) -> MessageResponse:
    """Turn the LLM integration off; the chatbot keeps answering from the knowledge base."""
    repo = ChatbotSettingsRepository(session)
    config = await repo.get_current()
    if config is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chatbot settings not found")
    await repo.apply_changes(config, {"is_active": False})
    invalidate_chatbot_cache()
    await record_admin_action(session, request, "deactivate", "chatbot_settings", config.id)
    return MessageResponse(message="Chatbot AI deactivated")


@router.get(
    "/conversations",
    response_model=PaginatedResponse[ChatbotConversationRead],
    summary="List Chatbot Conversations",
)
async def list_conversations(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    session_id: Optional[str] = Query(None, max_length=100),
    source: Optional[str] = Query(None, max_length=50),
    search: Optional[str] = Query(None, max_length=200),
    session: AsyncSession = Depends(get_session),
) -> PaginatedResponse[ChatbotConversationRead]:
    """
    Logged chatbot exchanges, newest first.

    - **session_id**: One conversation only.
    - **source**: ``openai``, ``knowledge_base``, ``knowledge_base_fallback`` or ``error``.
    """
    filters = {"session_id": session_id, "response_source": source}
    items, total = await ChatbotConversationRepository(session).paginate(page, limit, filters, search)
    return PaginatedResponse[ChatbotConversationRead](
        data=[ChatbotConversationRead.model_validate(item) for item in items],
        pagination=Pagination.build(page, limit, total),
    )
