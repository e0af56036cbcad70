"""Project I/O models for API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .blog_posts import SlugStr
from .common import JsonStrList, OptionalUrl


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    slug: SlugStr = None
    description: str = Field(min_length=1, max_length=2000)
    image: OptionalUrl = None
    technologies: List[str] = Field(default_factory=list)
    github_url: OptionalUrl = None
    live_url: OptionalUrl = None
    category: Optional[str] = Field(default=None, max_length=100)
    status: str = Field(default="Live", max_length=50)
    sort_order: int = Field(default=0, ge=0)
    featured: bool = False


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slug: SlugStr = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    image: OptionalUrl = None
    technologies: Optional[List[str]] = None
    github_url: OptionalUrl = None
    live_url: OptionalUrl = None
    category: Optional[str] = Field(default=None, max_length=100)
    status: Optional[str] = Field(default=None, max_length=50)
    sort_order: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    is_active: Optional[bool] = None


class ProjectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    description: str
    image: Optional[str] = None
    technologies: JsonStrList = Field(default_factory=list)
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    category: Optional[str] = None
    status: str
    sort_order: int
    featured: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PublicProject(BaseModel):
    """Project as shown on the public site."""

    id: str
    slug: str
    title: str
    description: str
    image: str
    technologies: List[str] = Field(default_factory=list)
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    category: Optional[str] = None
    status: str
    type: str = Field(description="'workflow' for automation projects, otherwise 'tool'")
    featured: bool = False
