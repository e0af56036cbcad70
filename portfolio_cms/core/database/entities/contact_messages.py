"""Messages sent through the public contact form."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from ..base import EntityBase


class ContactMessage(EntityBase, table=True):
    """Table: contact_messages"""

    __tablename__ = "contact_messages"

    name: str = Field(max_length=100)
    email: str = Field(index=True, max_length=255)
    subject: str = Field(max_length=200)
    message: str = Field(max_length=2000)
    company: Optional[str] = Field(default=None, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=50)
    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=500)
    is_read: bool = Field(default=False, index=True)
    is_active: bool = Field(default=True)
