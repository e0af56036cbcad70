"""
Blog post I/O models for API requests and responses.

Admin schemas mirror the table; the public schemas are the transformed shape
served by ``/api/blog`` and rendered by the public pages.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from portfolio_cms.core.slugs import validate_slug

from .common import JsonStrList, OptionalUrl


def check_slug(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().lower()
    if value == "":
        return None
    if not validate_slug(value):
        raise ValueError("Slug must be 3-100 lowercase letters, numbers and single hyphens")
    return value


SlugStr = Annotated[Optional[str], AfterValidator(check_slug)]


class BlogPostCreate(BaseModel):
    """Schema for creating a blog post via API."""

    title: str = Field(min_length=1, max_length=200)
    slug: SlugStr = Field(default=None, description="Generated from the title when omitted")
    content: str = Field(min_length=1)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    image_url: OptionalUrl = None
    category: Optional[str] = Field(default=None, max_length=100)
    tags: List[str] = Field(default_factory=list)
    author: Optional[str] = Field(default=None, max_length=100)
    meta_title: Optional[str] = Field(default=None, max_length=200)
    meta_description: Optional[str] = Field(default=None, max_length=300)
    published: bool = False
    featured: bool = False


class BlogPostUpdate(BaseModel):
    """Schema for updating a blog post via API; only provided fields change."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slug: SlugStr = None
    content: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    image_url: OptionalUrl = None
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    author: Optional[str] = Field(default=None, max_length=100)
    meta_title: Optional[str] = Field(default=None, max_length=200)
    meta_description: Optional[str] = Field(default=None, max_length=300)
    published: Optional[bool] = None
    featured: Optional[bool] = None
    is_active: Optional[bool] = None


class BlogPostRead(BaseModel):
    """Schema for reading a blog post in the admin panel."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    tags: JsonStrList = Field(default_factory=list)
    author: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    published: bool
    published_at: Optional[datetime] = None
    featured: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PublicBlogPostSummary(BaseModel):
    """Blog post as listed on the public site."""

    id: str
    slug: str
    title: str
    excerpt: str
    date: str = Field(description="ISO date the post was published")
    read_time: str = Field(description="Estimated reading time, e.g. '4 min read'")
    category: str
    image: str
    author: str
    featured: bool = False
    published_at: Optional[str] = None


class PublicBlogPost(PublicBlogPostSummary):
    """Full public blog post."""

    content: str
    tags: List[str] = Field(default_factory=list)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
