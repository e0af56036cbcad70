"""Public chatbot endpoints: suggested questions and the chat exchange."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.models.io.chatbot import ChatRequest, ChatResponse, PublicChatbotQuestion
from portfolio_cms.core.models.io.common import ApiResponse
from portfolio_cms.server.core.config import settings
from portfolio_cms.server.core.rate_limit import limiter
from portfolio_cms.server.services.chatbot import ChatbotService
from portfolio_cms.server.services.content import ContentService

router = APIRouter(tags=["chatbot"])


@router.get(
    "/questions",
    response_model=ApiResponse[List[PublicChatbotQuestion]],
    summary="List Suggested Questions",
    description="Active suggested questions shown in the chat widget, optionally filtered by category.",
)
async def list_questions(
    category: Optional[str] = Query(None, max_length=100),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[List[PublicChatbotQuestion]]:
    questions = await ContentService(session).get_chatbot_questions(category)
    return ApiResponse[List[PublicChatbotQuestion]](data=questions)


@router.post(
    "/chat",
    response_model=ApiResponse[ChatResponse],
    summary="Chat",
    description="Answer a visitor question from the knowledge base, or through the configured LLM when enabled.",
    response_description="The answer with its conversation id and source.",
    responses={
        400: {"description": "Invalid message"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(settings.chat_rate_limit)
async def chat(
    request: Request,
    payload: ChatRequest,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[ChatResponse]:
    """
    Answer a chat message.

    - **message**: Visitor question (1-1000 characters).
    - **conversation_id**: Id returned by a previous exchange; a new one is issued when omitted.

    The ``source`` of the answer is ``openai``, ``knowledge_base``,
    ``knowledge_base_fallback`` (LLM failed) or ``error``.
    """
    result = await ChatbotService(session).chat(payload.message, payload.conversation_id)
    return ApiResponse[ChatResponse](data=result)
