"""URL slug helpers."""

from __future__ import annotations

import re
import unicodedata
from typing import Awaitable, Callable

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 100


def generate_slug(text: str) -> str:
    """Turn a title into a URL slug.

    >>> generate_slug("  Hello, World!  ")
    'hello-world'
    """
    value = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    value = value.lower().strip()
    value = re.sub(r"[\s_]+", "-", value)
    value = re.sub(r"[^a-z0-9-]", "", value)
    value = re.sub(r"-{2,}", "-", value)
    return value.strip("-")[:SLUG_MAX_LENGTH].rstrip("-")


def validate_slug(slug: str) -> bool:
    """Return whether ``slug`` is lower-case kebab case of an acceptable length."""
    return SLUG_MIN_LENGTH <= len(slug) <= SLUG_MAX_LENGTH and bool(SLUG_PATTERN.match(slug))


async def ensure_unique_slug(base_slug: str, exists: Callable[[str], Awaitable[bool]]) -> str:
    """Append ``-1``, ``-2``, ... to ``base_slug`` until ``exists`` reports it free.

    Args:
        base_slug: Preferred slug
        exists: Coroutine function telling whether a slug is already taken
    """
    slug = base_slug
    counter = 1
    while await exists(slug):
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug
