"""
Base database models and utilities.

This module provides the foundational database components used across
all entities using SQLModel.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import ConfigDict
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Get current UTC datetime as naive datetime.

    Returns:
        Current UTC datetime without timezone info
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return uuid.uuid4().hex


def load_json(value: Optional[str], default: Any) -> Any:
    """Parse a JSON text column, returning ``default`` for empty or malformed values."""
    if value is None or value == "":
        return default
    try:
        parsed = json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return default
    if default is not None and not isinstance(parsed, type(default)):
        return default
    return parsed


def dump_json(value: Any) -> str:
    return json.dumps(value, default=str)


def load_json_list(value: Optional[str]) -> List[Any]:
    return load_json(value, [])


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


class EntityBase(Base):
    """Primary key and timestamps shared by every table."""

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def touch(self) -> None:
        self.updated_at = utc_now()
