"""
Chatbot repositories.

The knowledge repository implements the keyword search used to answer visitor
questions; the settings repository resolves the current configuration row.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.chatbot import ChatbotConversation, ChatbotKnowledge, ChatbotQuestion, ChatbotSettings
from .base import SqlRepository


class ChatbotKnowledgeRepository(SqlRepository[ChatbotKnowledge]):
    search_fields = ("title", "content", "category")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(
            session,
            ChatbotKnowledge,
            order_by=(ChatbotKnowledge.priority.desc(), ChatbotKnowledge.created_at.desc()),
        )

    async def search_terms(self, terms: Sequence[str], limit: int = 3) -> List[ChatbotKnowledge]:
        """Active items whose title, content or category contains any of ``terms``.

        Ordered by priority (highest first) then newest first.
        """
        if not terms:
            return []
        conditions = []
        for term in terms:
            pattern = f"%{term}%"
            conditions.extend(
                [
                    ChatbotKnowledge.title.ilike(pattern),
                    ChatbotKnowledge.content.ilike(pattern),
                    ChatbotKnowledge.category.ilike(pattern),
                ]
            )
        stmt = (
            select(ChatbotKnowledge)
            .where(ChatbotKnowledge.is_active == True)  # noqa: E712
            .where(or_(*conditions))
            .order_by(*self._order_by)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ChatbotQuestionRepository(SqlRepository[ChatbotQuestion]):
    search_fields = ("question_text", "category")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ChatbotQuestion)


class ChatbotSettingsRepository(SqlRepository[ChatbotSettings]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ChatbotSettings, order_by=(ChatbotSettings.updated_at.desc(),))

    async def get_current(self) -> Optional[ChatbotSettings]:
        """Most recently updated settings row, active or not."""
        items = await self.list(limit=1, include_inactive=True)
        return items[0] if items else None


class ChatbotConversationRepository(SqlRepository[ChatbotConversation]):
    search_fields = ("question", "response")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ChatbotConversation)
