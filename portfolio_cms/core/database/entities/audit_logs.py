"""Audit log entity."""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlmodel import Field

from ..base import EntityBase, load_json


class AuditLog(EntityBase, table=True):
    """Security-relevant admin action.

    Table: audit_logs
    """

    __tablename__ = "audit_logs"

    action: str = Field(index=True, max_length=100)
    resource: str = Field(index=True, max_length=100)
    resource_id: Optional[str] = Field(default=None, max_length=100)
    user_id: Optional[str] = Field(default=None, index=True, max_length=32)
    user_email: Optional[str] = Field(default=None, max_length=255)
    success: bool = Field(default=True)
    severity: str = Field(default="info", index=True, max_length=20)
    details: str = Field(default="{}")
    ip_address: Optional[str] = Field(default=None, max_length=64)

    def get_details(self) -> Dict[str, Any]:
        return load_json(self.details, {})
