"""
Site-wide search.

Blog posts, projects, case studies and experience entries are matched with a
case-insensitive substring search, scored for relevance and merged into one
list. Each content type gets a share of the requested limit so one busy type
cannot crowd out the others.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional, Sequence, Type

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from portfolio_cms.core.database.entities.blog_posts import BlogPost
from portfolio_cms.core.database.entities.case_studies import CaseStudy
from portfolio_cms.core.database.entities.experience import ExperienceEntry
from portfolio_cms.core.database.entities.projects import Project
from portfolio_cms.core.database.repositories import QueryBuilder, SqlRepository
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.search import SearchResult, SearchResults
from portfolio_cms.server.services.content import make_excerpt

logger = get_logger(__name__)

MIN_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 3

# Share of the limit given to each content type.
BLOG_SHARE = 0.4
PROJECT_SHARE = 0.3
CASE_STUDY_SHARE = 0.2
EXPERIENCE_SHARE = 0.1

_WORD_PATTERN = re.compile(r"\w+")


def calculate_relevance(text: Optional[str], query: str) -> float:
    """
    Score how well ``text`` matches ``query`` between 0 and 1.

    Exact match 1.0, prefix 0.9, contained phrase 0.7; otherwise 0.6 scaled by
    the share of query words found inside the text's words.
    """
    text_lower = (text or "").lower().strip()
    query_lower = query.lower().strip()
    if not text_lower or not query_lower:
        return 0.0
    if text_lower == query_lower:
        return 1.0
    if text_lower.startswith(query_lower):
        return 0.9
    if query_lower in text_lower:
        return 0.7

    query_words = query_lower.split()
    text_words = text_lower.split()
    matches = sum(1 for word in query_words if any(word in candidate for candidate in text_words))
    return min(matches / len(query_words) * 0.6, 0.6)


def build_suggestions(query: str, results: Sequence[SearchResult]) -> List[str]:
    """Related words taken from result titles and categories, in order of appearance."""
    query_lower = query.lower()
    seen: Dict[str, None] = {}
    for result in results:
        for word in _WORD_PATTERN.findall(f"{result.title} {result.category or ''}".lower()):
            if len(word) > 3 and query_lower not in word and word not in query_lower:
                seen.setdefault(word, None)
    return list(seen)[:MAX_SUGGESTIONS]


def _share(limit: int, fraction: float) -> int:
    return max(1, math.ceil(limit * fraction))


class SearchService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _find(
        self,
        model: Type[SQLModel],
        query: str,
        fields: Sequence[str],
        limit: int,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[Any]:
        stmt = SqlRepository(self.session, model).build_query(filters)
        stmt = QueryBuilder.apply_search(stmt, model, query, fields)
        stmt = stmt.order_by(model.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _blog_posts(self, query: str, limit: int) -> List[SearchResult]:
        posts = await self._find(
            BlogPost, query, ("title", "content", "excerpt", "category"), limit, filters={"published": True}
        )
        return [
            SearchResult(
                id=post.id,
                title=post.title,
                type="blog",
                slug=post.slug,
                category=post.category,
                excerpt=post.excerpt or make_excerpt(post.content),
                url=f"/blog/{post.slug}",
                relevance_score=max(
                    calculate_relevance(post.title, query),
                    calculate_relevance(post.content, query) * 0.8,
                    calculate_relevance(post.excerpt, query) * 0.6,
                ),
            )
            for post in posts
        ]

    async def _projects(self, query: str, limit: int) -> List[SearchResult]:
        projects = await self._find(Project, query, ("title", "description", "category"), limit)
        return [
            SearchResult(
                id=project.id,
                title=project.title,
                type="project",
                slug=project.slug,
                category=project.category,
                excerpt=make_excerpt(project.description, 150),
                url=f"/project/{project.slug}",
                relevance_score=max(
                    calculate_relevance(project.title, query),
                    calculate_relevance(project.description, query) * 0.8,
                    calculate_relevance(project.category, query) * 0.6,
                ),
            )
            for project in projects
        ]

    async def _case_studies(self, query: str, limit: int) -> List[SearchResult]:
        studies = await self._find(
            CaseStudy,
            query,
            ("title", "subtitle", "description", "full_description", "category", "challenge", "solution"),
            limit,
        )
        return [
            SearchResult(
                id=study.id,
                title=study.title,
                type="case-study",
                slug=study.slug,
                category=study.category,
                excerpt=study.subtitle or make_excerpt(study.description, 150),
                url=f"/case-study/{study.slug}",
                relevance_score=max(
                    calculate_relevance(study.title, query),
                    calculate_relevance(study.description, query) * 0.8,
                    calculate_relevance(study.subtitle, query) * 0.7,
                ),
            )
            for study in studies
        ]

    async def _experience(self, query: str, limit: int) -> List[SearchResult]:
        entries = await self._find(
            ExperienceEntry, query, ("title", "company", "achievements", "type", "category"), limit
        )
        return [
            SearchResult(
                id=entry.id,
                title=f"{entry.title} at {entry.company}",
                type="experience",
                category=entry.category,
                excerpt=f"{entry.period} · {entry.type}",
                url="/#experience",
                relevance_score=max(
                    calculate_relevance(entry.title, query),
                    calculate_relevance(entry.company, query),
                    calculate_relevance(" ".join(entry.get_achievements_list()), query) * 0.8,
                ),
            )
            for entry in entries
        ]

    async def search(self, query: str, limit: int = 10) -> SearchResults:
        """
        Search every public content type.

        Args:
            query: Search text, at least two characters after trimming
            limit: Maximum number of results returned

        Returns:
            Results ordered by relevance, the number of matches before the limit
            was applied and a few related search terms.
        """
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            raise ValueError(f"Query must be at least {MIN_QUERY_LENGTH} characters long")

        matches = [
            *await self._blog_posts(query, _share(limit, BLOG_SHARE)),
            *await self._projects(query, _share(limit, PROJECT_SHARE)),
            *await self._case_studies(query, _share(limit, CASE_STUDY_SHARE)),
            *await self._experience(query, _share(limit, EXPERIENCE_SHARE)),
        ]
        ranked = sorted(matches, key=lambda result: result.relevance_score, reverse=True)[:limit]
        logger.debug(f"Search '{query}' matched {len(matches)} items")
        return SearchResults(
            query=query,
            results=ranked,
            total_results=len(matches),
            suggestions=build_suggestions(query, ranked),
        )
