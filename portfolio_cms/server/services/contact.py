"""
Contact form submissions.

Messages are checked against a short spam keyword list, stored in
``contact_messages`` for the admin inbox and logged without their body.
"""

from __future__ import annotations

from typing import Optional, Tuple

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database.entities.contact_messages import ContactMessage
from portfolio_cms.core.database.repositories import SqlRepository
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.contact import ContactRequest

logger = get_logger(__name__)

SPAM_KEYWORDS: Tuple[str, ...] = ("viagra", "casino", "lottery", "winner", "congratulations", "click here")


class ContactError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def is_spam(subject: str, message: str) -> bool:
    """Whether the subject or body contains one of :data:`SPAM_KEYWORDS` (case-insensitive)."""
    text = f"{subject} {message}".lower()
    return any(keyword in text for keyword in SPAM_KEYWORDS)


class ContactService:
    def __init__(self, session: AsyncSession) -> None:
        self.repo = SqlRepository(session, ContactMessage, search_fields=("name", "email", "subject", "message"))

    async def submit(
        self,
        payload: ContactRequest,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> ContactMessage:
        """
        Store a visitor message.

        Raises:
            ContactError: The message looks like spam.
        """
        if is_spam(payload.subject, payload.message):
            logger.warning(f"Rejected contact message flagged as spam from {payload.email} ({ip_address})")
            raise ContactError("Message flagged as spam")

        entity = await self.repo.create(
            ContactMessage(
                **payload.model_dump(),
                ip_address=ip_address,
                user_agent=(user_agent or "")[:500] or None,
            )
        )
        logger.info(f"Contact message {entity.id} from {payload.email}: {payload.subject!r}")
        return entity

    async def mark_read(self, message_id: str, is_read: bool = True) -> Optional[ContactMessage]:
        entity = await self.repo.get_by_id(message_id)
        if entity is None or not entity.is_active:
            return None
        return await self.repo.apply_changes(entity, {"is_read": is_read})

    async def unread_count(self) -> int:
        return await self.repo.count(filters={"is_read": False})
