"""
Portfolio chatbot.

Answers visitor questions from the knowledge base. When the current chatbot
settings are active and carry an API key, the question is sent to an
OpenAI-compatible ``/chat/completions`` endpoint with the best knowledge match
as context; LLM failures fall back to the knowledge base when enabled. Every
exchange is stored as a :class:`ChatbotConversation`.
"""

from __future__ import annotations

import re
import secrets
import time
from typing import Dict, List, Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database.entities.chatbot import ChatbotConversation, ChatbotSettings
from portfolio_cms.core.database.repositories import (
    ChatbotConversationRepository,
    ChatbotKnowledgeRepository,
    ChatbotSettingsRepository,
)
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.chatbot import ChatResponse
from portfolio_cms.core.monitoring import log_llm_call
from portfolio_cms.server.core.config import settings

logger = get_logger(__name__)

SOURCE_AI = "openai"
SOURCE_KNOWLEDGE = "knowledge_base"
SOURCE_FALLBACK = "knowledge_base_fallback"
SOURCE_ERROR = "error"

NO_TERMS_MESSAGE = "I don't have specific information about that topic. Could you please rephrase your question?"
NO_MATCH_MESSAGE = (
    "I don't have specific information about that topic in my knowledge base. "
    "However, {author} would be happy to discuss this with you directly through the contact page."
)
SEARCH_ERROR_MESSAGE = "I'm experiencing some technical difficulties right now. Please try asking your question again."
UNAVAILABLE_MESSAGE = "I apologize, but I'm currently unable to process your request. Please try again later."
EMPTY_COMPLETION_MESSAGE = "I apologize, but I could not generate a response."
DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant for {author}'s portfolio website. Provide professional and "
    "informative responses about their skills, experience, and projects."
)

_WORD_PATTERN = re.compile(r"[\w'-]+")


class LLMError(Exception):
    """The LLM endpoint failed or returned an unusable payload."""


def extract_terms(message: str) -> List[str]:
    """Lower-cased words longer than two characters, in order, without duplicates."""
    seen: Dict[str, None] = {}
    for word in _WORD_PATTERN.findall(message.lower()):
        if len(word) > 2:
            seen.setdefault(word, None)
    return list(seen)


def new_conversation_id() -> str:
    return f"conv_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


class ChatbotService:
    """Knowledge-base search with an optional LLM front."""

    def __init__(self, session: AsyncSession, http_client: Optional[httpx.AsyncClient] = None) -> None:
        self.session = session
        self.http_client = http_client
        self.knowledge = ChatbotKnowledgeRepository(session)

    async def search_knowledge(self, message: str) -> str:
        """Best knowledge-base answer for ``message`` or a canned reply."""
        terms = extract_terms(message)
        if not terms:
            return NO_TERMS_MESSAGE
        try:
            items = await self.knowledge.search_terms(terms, limit=3)
        except SQLAlchemyError as e:
            logger.error(f"Knowledge base search failed: {e}", exc_info=True)
            await self.session.rollback()
            return SEARCH_ERROR_MESSAGE
        if not items:
            return NO_MATCH_MESSAGE.format(author=settings.default_author)
        return items[0].content

    async def ask_llm(self, message: str, context: str, config: ChatbotSettings) -> str:
        """
        Query the OpenAI-compatible completion endpoint.

        Args:
            message: Visitor question
            context: Knowledge-base context appended to the system prompt
            config: Active chatbot settings holding the key and model parameters

        Returns:
            The assistant message content.

        Raises:
            LLMError: On transport errors, non-2xx responses or malformed payloads.
        """
        system_prompt = config.system_prompt or DEFAULT_SYSTEM_PROMPT.format(author=settings.default_author)
        payload = {
            "model": config.model_name,
            "messages": [
                {"role": "system", "content": f"{system_prompt}\n\nKnowledge base context:\n{context}"},
                {"role": "user", "content": message},
            ],
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }
        headers = {"Authorization": f"Bearer {config.openai_api_key}", "Content-Type": "application/json"}
        url = f"{settings.openai_base_url.rstrip('/')}/chat/completions"

        start = time.perf_counter()
        try:
            if self.http_client is not None:
                response = await self.http_client.post(url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=settings.llm_timeout_seconds) as client:
                    response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise LLMError(f"LLM request failed: {e}") from e
        duration_ms = (time.perf_counter() - start) * 1000

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMError(f"Unexpected LLM response payload: {e}") from e

        usage = data.get("usage") or {}
        log_llm_call(config.model_name, usage.get("total_tokens"), duration_ms)
        return content or EMPTY_COMPLETION_MESSAGE

    async def chat(self, message: str, conversation_id: Optional[str] = None) -> ChatResponse:
        """Answer ``message`` and record the exchange."""
        start = time.perf_counter()
        config = await ChatbotSettingsRepository(self.session).get_current()

        if config is not None and config.is_active and config.openai_api_key:
            context = await self.search_knowledge(message)
            try:
                response = await self.ask_llm(message, context, config)
                source = SOURCE_AI
            except LLMError as e:
                logger.warning(f"LLM unavailable, falling back: {e}")
                if config.fallback_enabled:
                    response, source = context, SOURCE_FALLBACK
                else:
                    response, source = UNAVAILABLE_MESSAGE, SOURCE_ERROR
        else:
            response = await self.search_knowledge(message)
            source = SOURCE_KNOWLEDGE

        session_id = conversation_id or new_conversation_id()
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        await self._record(session_id, message, response, source, elapsed_ms)
        return ChatResponse(response=response, conversation_id=session_id, source=source, ai_used=source == SOURCE_AI)

    async def _record(self, session_id: str, question: str, response: str, source: str, elapsed_ms: int) -> None:
        conversation = ChatbotConversation(
            session_id=session_id,
            question=question,
            response=response,
            response_source=source,
            ai_used=source == SOURCE_AI,
            response_time_ms=elapsed_ms,
        )
        try:
            await ChatbotConversationRepository(self.session).create(conversation)
        except SQLAlchemyError as e:
            logger.error(f"Failed to store chatbot conversation {session_id}: {e}", exc_info=True)
            await self.session.rollback()
