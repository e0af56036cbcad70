"""Project entity."""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import Field

from ..base import EntityBase, dump_json, load_json_list


class Project(EntityBase, table=True):
    """Portfolio project.

    Table: projects
    """

    __tablename__ = "projects"

    title: str = Field(max_length=200)
    slug: str = Field(index=True, unique=True, max_length=100)
    description: str = Field(max_length=2000)
    image: Optional[str] = Field(default=None, max_length=500)
    technologies: str = Field(default="[]", description="JSON array of technology names")
    github_url: Optional[str] = Field(default=None, max_length=300)
    live_url: Optional[str] = Field(default=None, max_length=300)
    category: Optional[str] = Field(default=None, max_length=100)
    status: str = Field(default="Live", max_length=50)
    sort_order: int = Field(default=0, index=True)
    featured: bool = Field(default=False)
    is_active: bool = Field(default=True)

    def get_technologies_list(self) -> List[str]:
        return load_json_list(self.technologies)

    def set_technologies_list(self, technologies: List[str]) -> None:
        self.technologies = dump_json(technologies)
