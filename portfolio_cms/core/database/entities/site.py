"""
Site structure entities.

Navigation entries, social links, free-form content sections and the
key/value site settings store.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlmodel import Field

from ..base import EntityBase, dump_json, load_json


class NavigationItem(EntityBase, table=True):
    """Table: navigation_items"""

    __tablename__ = "navigation_items"

    title: str = Field(max_length=100)
    href: str = Field(max_length=200)
    is_section: bool = Field(default=True, description="Anchor on the home page rather than a separate page")
    sort_order: int = Field(default=0, index=True)
    is_active: bool = Field(default=True)


class SocialLink(EntityBase, table=True):
    """Table: social_links"""

    __tablename__ = "social_links"

    platform: str = Field(max_length=50)
    url: str = Field(max_length=300)
    sort_order: int = Field(default=0, index=True)
    is_active: bool = Field(default=True)


class ContentSection(EntityBase, table=True):
    """Named block of page copy such as ``hero`` or ``about``.

    ``section_metadata`` is a JSON object; it is exposed as ``metadata`` in the API.

    Table: content_sections
    """

    __tablename__ = "content_sections"

    section_name: str = Field(index=True, max_length=100)
    content: str
    section_metadata: Optional[str] = Field(default=None)
    is_active: bool = Field(default=True)


class SiteSetting(EntityBase, table=True):
    """Key/value settings store; ``value`` is a JSON object.

    Table: site_settings
    """

    __tablename__ = "site_settings"

    key: str = Field(index=True, unique=True, max_length=100)
    value: str = Field(default="{}")

    def get_value(self) -> Dict[str, Any]:
        return load_json(self.value, {})

    def set_value(self, value: Dict[str, Any]) -> None:
        self.value = dump_json(value)
