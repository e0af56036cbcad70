"""Case study I/O models for API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .blog_posts import SlugStr
from .common import JsonList, JsonObject, JsonStrList, OptionalUrl

DEFAULT_COLOR = "#3B82F6"


class CaseStudyCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    slug: SlugStr = None
    subtitle: Optional[str] = Field(default=None, max_length=300)
    description: str = Field(min_length=1, max_length=2000)
    full_description: Optional[str] = None
    image: OptionalUrl = None
    metrics: Dict[str, Any] = Field(default_factory=dict)
    results: List[Any] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    timeline: List[Any] = Field(default_factory=list)
    category: Optional[str] = Field(default=None, max_length=100)
    color: str = Field(default=DEFAULT_COLOR, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=100)
    challenge: Optional[str] = None
    solution: Optional[str] = None
    sort_order: int = Field(default=0, ge=0)
    featured: bool = False


class CaseStudyUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slug: SlugStr = None
    subtitle: Optional[str] = Field(default=None, max_length=300)
    description: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    full_description: Optional[str] = None
    image: OptionalUrl = None
    metrics: Optional[Dict[str, Any]] = None
    results: Optional[List[Any]] = None
    tools: Optional[List[str]] = None
    timeline: Optional[List[Any]] = None
    category: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=100)
    challenge: Optional[str] = None
    solution: Optional[str] = None
    sort_order: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    is_active: Optional[bool] = None


class CaseStudyRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    subtitle: Optional[str] = None
    description: str
    full_description: Optional[str] = None
    image: Optional[str] = None
    metrics: JsonObject = Field(default_factory=dict)
    results: JsonList = Field(default_factory=list)
    tools: JsonStrList = Field(default_factory=list)
    timeline: JsonList = Field(default_factory=list)
    category: Optional[str] = None
    color: str
    icon: Optional[str] = None
    challenge: Optional[str] = None
    solution: Optional[str] = None
    sort_order: int
    featured: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PublicCaseStudy(BaseModel):
    """Case study as shown on the public site; JSON fields always parsed."""

    id: str
    slug: str
    title: str
    subtitle: Optional[str] = None
    description: str
    full_description: Optional[str] = None
    image: str
    metrics: Dict[str, Any] = Field(default_factory=dict)
    results: List[Any] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    timeline: List[Any] = Field(default_factory=list)
    category: Optional[str] = None
    color: str = DEFAULT_COLOR
    icon: Optional[str] = None
    challenge: Optional[str] = None
    solution: Optional[str] = None
    featured: bool = False
