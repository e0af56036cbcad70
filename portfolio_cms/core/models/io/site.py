"""
Site structure I/O models.

Skills, tools, navigation, social links, content sections, site settings and
the newsletter embed configuration.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common import JsonObject, OptionalUrl, _json_list

# =====================================================================
# Skills and tools
# =====================================================================


class SkillItem(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    proficiency: int = Field(ge=0, le=100)


class SkillCategoryCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, max_length=20)
    skills: List[SkillItem] = Field(default_factory=list)
    sort_order: int = Field(default=0, ge=0)


class SkillCategoryUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, max_length=20)
    skills: Optional[List[SkillItem]] = None
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class SkillCategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    color: Optional[str] = None
    skills: List[SkillItem] = Field(default_factory=list)
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("skills", mode="before")
    @classmethod
    def _parse_skills(cls, value: Any) -> List[Any]:
        return _json_list(value)


class ToolCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    logo_url: OptionalUrl = None
    category: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    sort_order: int = Field(default=0, ge=0)


class ToolUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    logo_url: OptionalUrl = None
    category: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class ToolRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


# =====================================================================
# Navigation, social links, content sections
# =====================================================================


class NavigationItemCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    href: str = Field(min_length=1, max_length=200)
    is_section: bool = True
    sort_order: int = Field(default=0, ge=0)


class NavigationItemUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    href: Optional[str] = Field(default=None, min_length=1, max_length=200)
    is_section: Optional[bool] = None
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class NavigationItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    href: str
    is_section: bool
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


def _require_http_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value.lower().startswith(("http://", "https://")) or len(value) > 300:
        raise ValueError("Must be a valid http(s) URL of at most 300 characters")
    return value


RequiredHttpUrl = Annotated[str, AfterValidator(_require_http_url)]
HttpUrlStr = Annotated[Optional[str], AfterValidator(_require_http_url)]


class SocialLinkCreate(BaseModel):
    platform: str = Field(min_length=1, max_length=50)
    url: RequiredHttpUrl
    sort_order: int = Field(default=0, ge=0)


class SocialLinkUpdate(BaseModel):
    platform: Optional[str] = Field(default=None, min_length=1, max_length=50)
    url: HttpUrlStr = None
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class SocialLinkRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    platform: str
    url: str
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ContentSectionCreate(BaseModel):
    section_name: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1)
    metadata: Optional[Dict[str, Any]] = None


class ContentSectionUpdate(BaseModel):
    section_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    content: Optional[str] = Field(default=None, min_length=1)
    metadata: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class ContentSectionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    section_name: str
    content: str
    metadata: JsonObject = Field(default_factory=dict, validation_alias=AliasChoices("section_metadata", "metadata"))
    is_active: bool
    created_at: datetime
    updated_at: datetime


# =====================================================================
# Site settings and newsletter
# =====================================================================


class SiteSettingsPayload(BaseModel):
    """General site settings stored under the ``site`` key."""

    site_name: str = Field(default="Portfolio", min_length=1, max_length=100)
    site_description: str = Field(default="", max_length=300)
    contact_email: Optional[EmailStr] = None
    admin_email: Optional[EmailStr] = None
    maintenance_mode: bool = False
    analytics_enabled: bool = True

    @field_validator("contact_email", "admin_email", mode="before")
    @classmethod
    def _blank_email(cls, value: Any) -> Any:
        return None if value == "" else value


class NewsletterSettingsPayload(BaseModel):
    """Newsletter embed configuration stored under the ``newsletter`` key."""

    embed_code: str = Field(min_length=1)
    attribution_code: Optional[str] = None
    is_enabled: bool = True


class NewsletterSettingsRead(BaseModel):
    embed_code: Optional[str] = None
    attribution_code: Optional[str] = None
    is_enabled: bool = False
    configured: bool = False
    updated_at: Optional[str] = None


class NewsletterSubscribeRequest(BaseModel):
    email: EmailStr


class PublicSkillCategory(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    color: Optional[str] = None
    skills: List[SkillItem] = Field(default_factory=list)


class PublicTool(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None


class PublicNavigationItem(BaseModel):
    id: str
    title: str
    href: str
    is_section: bool


class PublicSocialLink(BaseModel):
    id: str
    platform: str
    url: str


class PublicContentSection(BaseModel):
    id: str
    section_name: str
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
