"""Chatbot I/O models for API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import JsonStrList


class ChatbotKnowledgeCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=10000)
    category: Optional[str] = Field(default=None, max_length=100)
    source_type: str = Field(default="manual", max_length=50)
    source_file: Optional[str] = Field(default=None, max_length=300)
    tags: List[str] = Field(default_factory=list)
    priority: int = Field(default=0, ge=0, le=10)


class ChatbotKnowledgeUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1, max_length=10000)
    category: Optional[str] = Field(default=None, max_length=100)
    source_type: Optional[str] = Field(default=None, max_length=50)
    source_file: Optional[str] = Field(default=None, max_length=300)
    tags: Optional[List[str]] = None
    priority: Optional[int] = Field(default=None, ge=0, le=10)
    is_active: Optional[bool] = None


class ChatbotKnowledgeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    category: Optional[str] = None
    source_type: str
    source_file: Optional[str] = None
    tags: JsonStrList = Field(default_factory=list)
    priority: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ChatbotQuestionCreate(BaseModel):
    question_text: str = Field(min_length=1, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    category: Optional[str] = Field(default=None, max_length=100)
    response_mapping: Optional[str] = None
    sort_order: int = Field(default=0, ge=0)


class ChatbotQuestionUpdate(BaseModel):
    question_text: Optional[str] = Field(default=None, min_length=1, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    category: Optional[str] = Field(default=None, max_length=100)
    response_mapping: Optional[str] = None
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class ChatbotQuestionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    question_text: str
    icon: Optional[str] = None
    category: Optional[str] = None
    response_mapping: Optional[str] = None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PublicChatbotQuestion(BaseModel):
    id: str
    question_text: str
    icon: Optional[str] = None
    category: Optional[str] = None


class ChatbotSettingsUpdate(BaseModel):
    """Upsert payload; an omitted ``openai_api_key`` keeps the stored key, an empty one removes it."""

    openai_api_key: Optional[str] = None
    model_name: str = Field(default="gpt-4o-mini", min_length=1, max_length=100)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, ge=1, le=4000)
    system_prompt: Optional[str] = Field(default=None, max_length=4000)
    is_active: bool = True
    fallback_enabled: bool = True
    cost_limit: float = Field(default=100.0, ge=0.0)


class ChatbotSettingsRead(BaseModel):
    """Settings as returned to the admin panel; the API key is never echoed back."""

    id: Optional[str] = None
    has_api_key: bool = False
    api_key_preview: Optional[str] = None
    model_name: str = "gpt-4o-mini"
    temperature: float = 0.7
    max_tokens: int = 1000
    system_prompt: Optional[str] = None
    is_active: bool = False
    fallback_enabled: bool = True
    cost_limit: float = 100.0
    updated_at: Optional[datetime] = None


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=1000)
    conversation_id: Optional[str] = Field(default=None, max_length=100)

    @field_validator("message")
    @classmethod
    def _strip_message(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Message cannot be blank")
        return value


class ChatResponse(BaseModel):
    response: str
    conversation_id: str
    source: str = Field(description="'openai', 'knowledge_base', 'knowledge_base_fallback' or 'error'")
    ai_used: bool = False


class ChatbotConversationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    session_id: str
    question: str
    response: str
    response_source: str
    ai_used: bool
    response_time_ms: Optional[int] = None
    created_at: datetime
