"""Admin authentication I/O models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from portfolio_cms.core.security.passwords import MIN_PASSWORD_LENGTH


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=200)
    otp: Optional[str] = Field(default=None, max_length=16, description="TOTP or backup code when 2FA is enabled")


class AdminUserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: Optional[str] = None
    role: str
    two_factor_enabled: bool = False
    last_login_at: Optional[datetime] = None


class LoginData(BaseModel):
    user: AdminUserRead
    token: str
    expires_in: int = Field(description="Token lifetime in seconds")


class TokenData(BaseModel):
    token: str
    expires_in: int


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=200)
