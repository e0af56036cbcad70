"""Repositories for projects and case studies."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.case_studies import CaseStudy
from ..entities.projects import Project
from .base import SlugRepository


class ProjectRepository(SlugRepository[Project]):
    search_fields = ("title", "description", "category")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Project)


class CaseStudyRepository(SlugRepository[CaseStudy]):
    search_fields = ("title", "subtitle", "description", "category")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CaseStudy)
