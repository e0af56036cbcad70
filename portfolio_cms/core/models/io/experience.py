"""Experience timeline I/O models."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import JsonStrList


class ExperienceCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    company: str = Field(min_length=1, max_length=200)
    period: str = Field(min_length=1, max_length=100)
    type: str = Field(min_length=1, max_length=50)
    category: str = Field(min_length=1, max_length=50)
    achievements: List[str] = Field(default_factory=list)
    metrics: Optional[str] = Field(default=None, max_length=200)
    icon: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    sort_order: int = Field(default=0, ge=0)


class ExperienceUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    company: Optional[str] = Field(default=None, min_length=1, max_length=200)
    period: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    achievements: Optional[List[str]] = None
    metrics: Optional[str] = Field(default=None, max_length=200)
    icon: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class ExperienceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    company: str
    period: str
    type: str
    category: str
    achievements: JsonStrList = Field(default_factory=list)
    metrics: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PublicExperience(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    company: str
    period: str
    type: str
    category: str
    achievements: JsonStrList = Field(default_factory=list)
    metrics: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
