"""Site-wide search I/O models."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

SearchResultType = Literal["blog", "project", "case-study", "experience"]


class SearchResult(BaseModel):
    id: str
    title: str
    type: SearchResultType
    url: str
    slug: Optional[str] = None
    category: Optional[str] = None
    excerpt: Optional[str] = None
    relevance_score: float = Field(ge=0, le=1)


class SearchResults(BaseModel):
    query: str
    results: List[SearchResult] = Field(default_factory=list)
    total_results: int = 0
    suggestions: List[str] = Field(default_factory=list)
