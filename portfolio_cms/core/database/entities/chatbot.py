"""
Chatbot entities.

The knowledge base answers visitor questions, suggested questions are shown in
the chat widget, a single active settings row configures the optional LLM and
every exchange is logged as a conversation.
"""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from ..base import EntityBase


class ChatbotKnowledge(EntityBase, table=True):
    """Table: chatbot_knowledge"""

    __tablename__ = "chatbot_knowledge"

    title: str = Field(max_length=200)
    content: str = Field(max_length=10000)
    category: Optional[str] = Field(default=None, max_length=100, index=True)
    source_type: str = Field(default="manual", max_length=50)
    source_file: Optional[str] = Field(default=None, max_length=300)
    tags: str = Field(default="[]")
    priority: int = Field(default=0, ge=0, le=10, index=True)
    is_active: bool = Field(default=True)


class ChatbotQuestion(EntityBase, table=True):
    """Table: chatbot_questions"""

    __tablename__ = "chatbot_questions"

    question_text: str = Field(max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    category: Optional[str] = Field(default=None, max_length=100)
    response_mapping: Optional[str] = Field(default=None)
    sort_order: int = Field(default=0, index=True)
    is_active: bool = Field(default=True)


class ChatbotSettings(EntityBase, table=True):
    """Table: chatbot_settings"""

    __tablename__ = "chatbot_settings"

    openai_api_key: Optional[str] = Field(default=None)
    model_name: str = Field(default="gpt-4o-mini", max_length=100)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, ge=1, le=4000)
    system_prompt: Optional[str] = Field(default=None)
    is_active: bool = Field(default=True)
    fallback_enabled: bool = Field(default=True)
    cost_limit: float = Field(default=100.0, ge=0.0)


class ChatbotConversation(EntityBase, table=True):
    """Table: chatbot_conversations"""

    __tablename__ = "chatbot_conversations"

    session_id: str = Field(index=True, max_length=100)
    question: str
    response: str
    response_source: str = Field(max_length=50)
    ai_used: bool = Field(default=False)
    response_time_ms: Optional[int] = Field(default=None)
