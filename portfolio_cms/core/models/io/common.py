"""
Shared I/O building blocks.

Response envelopes used by every JSON endpoint, pagination metadata and
annotated types that turn JSON text columns into structured values.
"""

import json
import math
import re
from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, Field

T = TypeVar("T")

_URL_PATTERN = re.compile(r"^(https?://[^\s/$.?#][^\s]*|/[^\s]*)$", re.IGNORECASE)


def _parse_json(value: Any, default: Any) -> Any:
    if value is None or value == "":
        return default
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return default
    if not isinstance(value, type(default)):
        return default
    return value


def _json_list(value: Any) -> List[Any]:
    return _parse_json(value, [])


def _json_object(value: Any) -> Dict[str, Any]:
    return _parse_json(value, {})


def _optional_url(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if value == "":
        return None
    if not _URL_PATTERN.match(value):
        raise ValueError("Must be an absolute http(s) URL or a site-relative path")
    return value


JsonList = Annotated[List[Any], BeforeValidator(_json_list)]
JsonStrList = Annotated[List[str], BeforeValidator(_json_list)]
JsonObject = Annotated[Dict[str, Any], BeforeValidator(_json_object)]
OptionalUrl = Annotated[Optional[str], BeforeValidator(_optional_url)]


class Pagination(BaseModel):
    """Pagination metadata returned with list responses."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


class ApiResponse(BaseModel, Generic[T]):
    """Envelope of a successful JSON response."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class PaginatedResponse(BaseModel, Generic[T]):
    """Envelope of a paginated list response."""

    success: bool = True
    message: Optional[str] = None
    data: List[T] = Field(default_factory=list)
    pagination: Pagination


class ErrorResponse(BaseModel):
    """Envelope of an error response."""

    success: bool = False
    message: str
    error: Optional[str] = None
    errors: Optional[List[Any]] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str
