"""
Contact form I/O models.

Visitors submit :class:`ContactRequest`; admins read the stored submissions as
:class:`ContactMessageRead` and mark them read through :class:`ContactMessageUpdate`.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

MAX_MESSAGE_LENGTH = 2000


class ContactRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    subject: str = Field(min_length=5, max_length=200)
    message: str = Field(min_length=10, max_length=MAX_MESSAGE_LENGTH)
    company: Optional[str] = Field(default=None, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=50)


class ContactFormConfig(BaseModel):
    max_message_length: int = MAX_MESSAGE_LENGTH
    required_fields: List[str] = Field(default_factory=lambda: ["name", "email", "subject", "message"])
    optional_fields: List[str] = Field(default_factory=lambda: ["company", "phone"])
    response_time: str = "24 hours"
    spam_protection: bool = True


class ContactMessageUpdate(BaseModel):
    is_read: bool


class ContactMessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    subject: str
    message: str
    company: Optional[str] = None
    phone: Optional[str] = None
    ip_address: Optional[str] = None
    is_read: bool
    created_at: datetime
