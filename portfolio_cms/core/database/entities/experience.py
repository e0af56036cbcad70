"""Work experience timeline entries."""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import Field

from ..base import EntityBase, dump_json, load_json_list


class ExperienceEntry(EntityBase, table=True):
    """One role in the experience timeline; ``achievements`` is a JSON array of strings.

    Table: experience_entries
    """

    __tablename__ = "experience_entries"

    title: str = Field(max_length=200)
    company: str = Field(max_length=200)
    period: str = Field(max_length=100, description="Free text such as '2021 - Present'")
    type: str = Field(max_length=50, description="Full-time, Contract, Freelance, ...")
    category: str = Field(max_length=50)
    achievements: str = Field(default="[]")
    metrics: Optional[str] = Field(default=None, max_length=200)
    icon: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    sort_order: int = Field(default=0, index=True)
    is_active: bool = Field(default=True)

    def get_achievements_list(self) -> List[str]:
        return [str(item) for item in load_json_list(self.achievements)]

    def set_achievements_list(self, achievements: List[str]) -> None:
        self.achievements = dump_json(achievements)
