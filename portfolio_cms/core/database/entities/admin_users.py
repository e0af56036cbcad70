"""
Admin user entity.

Admin users sign in to the content-management panel. Passwords are stored as
passlib hashes; two-factor authentication keeps a TOTP secret and hashed
one-time backup codes.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlmodel import Field

from ..base import EntityBase, dump_json, load_json_list


class AdminUser(EntityBase, table=True):
    """Administrator account.

    Table: admin_users
    """

    __tablename__ = "admin_users"

    email: str = Field(index=True, unique=True, max_length=255, description="Lower-cased login email")
    password_hash: str = Field(description="passlib password hash")
    name: Optional[str] = Field(default=None, max_length=100)
    role: str = Field(default="admin", max_length=20)
    is_active: bool = Field(default=True)
    last_login_at: Optional[datetime] = Field(default=None)

    two_factor_secret: Optional[str] = Field(default=None, description="Base32 TOTP secret (pending or enabled)")
    two_factor_enabled: bool = Field(default=False)
    backup_codes: str = Field(default="[]", description="JSON array of hashed backup codes")

    def get_backup_codes_list(self) -> List[str]:
        return load_json_list(self.backup_codes)

    def set_backup_codes_list(self, codes: List[str]) -> None:
        self.backup_codes = dump_json(codes)

    def __repr__(self) -> str:
        return f"AdminUser(email={self.email}, role={self.role})"
