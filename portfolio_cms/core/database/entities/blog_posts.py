"""
Blog post entity.

Posts are visible on the public site only when both ``published`` and
``is_active`` are set. ``published_at`` is stamped on the first publish.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlmodel import Field

from ..base import EntityBase, dump_json, load_json_list


class BlogPost(EntityBase, table=True):
    """Blog article.

    Table: blog_posts
    """

    __tablename__ = "blog_posts"

    title: str = Field(max_length=200)
    slug: str = Field(index=True, unique=True, max_length=100)
    content: str
    excerpt: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[str] = Field(default=None, max_length=500)
    category: Optional[str] = Field(default=None, max_length=100, index=True)
    tags: str = Field(default="[]", description="JSON array of tag names")
    author: Optional[str] = Field(default=None, max_length=100)
    meta_title: Optional[str] = Field(default=None, max_length=200)
    meta_description: Optional[str] = Field(default=None, max_length=300)
    published: bool = Field(default=False, index=True)
    published_at: Optional[datetime] = Field(default=None, index=True)
    featured: bool = Field(default=False)
    is_active: bool = Field(default=True)

    def get_tags_list(self) -> List[str]:
        return load_json_list(self.tags)

    def set_tags_list(self, tags: List[str]) -> None:
        self.tags = dump_json(tags)
