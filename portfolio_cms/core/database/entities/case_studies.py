"""Case study entity."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from ..base import EntityBase


class CaseStudy(EntityBase, table=True):
    """Client case study with metrics, results and a timeline.

    ``metrics`` holds a JSON object; ``results``, ``tools`` and ``timeline`` hold
    JSON arrays.

    Table: case_studies
    """

    __tablename__ = "case_studies"

    title: str = Field(max_length=200)
    slug: str = Field(index=True, unique=True, max_length=100)
    subtitle: Optional[str] = Field(default=None, max_length=300)
    description: str = Field(max_length=2000)
    full_description: Optional[str] = Field(default=None)
    image: Optional[str] = Field(default=None, max_length=500)
    metrics: str = Field(default="{}")
    results: str = Field(default="[]")
    tools: str = Field(default="[]")
    timeline: str = Field(default="[]")
    category: Optional[str] = Field(default=None, max_length=100)
    color: str = Field(default="#3B82F6", max_length=20)
    icon: Optional[str] = Field(default=None, max_length=100)
    challenge: Optional[str] = Field(default=None)
    solution: Optional[str] = Field(default=None)
    sort_order: int = Field(default=0, index=True)
    featured: bool = Field(default=False)
    is_active: bool = Field(default=True)
