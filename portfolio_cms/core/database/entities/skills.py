"""Skill category and tool entities shown in the about section."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlmodel import Field

from ..base import EntityBase, dump_json, load_json_list


class SkillCategory(EntityBase, table=True):
    """Group of skills; ``skills`` is a JSON array of ``{name, proficiency}``.

    Table: skill_categories
    """

    __tablename__ = "skill_categories"

    title: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, max_length=20)
    skills: str = Field(default="[]")
    sort_order: int = Field(default=0, index=True)
    is_active: bool = Field(default=True)

    def get_skills_list(self) -> List[Dict[str, Any]]:
        return [item for item in load_json_list(self.skills) if isinstance(item, dict)]

    def set_skills_list(self, skills: List[Dict[str, Any]]) -> None:
        self.skills = dump_json(skills)


class Tool(EntityBase, table=True):
    """Tool or platform used in the author's work.

    Table: tools
    """

    __tablename__ = "tools"

    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    category: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    sort_order: int = Field(default=0, index=True)
    is_active: bool = Field(default=True)
