from __future__ import annotations

import pytest

from portfolio_cms.core.slugs import ensure_unique_slug, generate_slug, validate_slug


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Hello World", "hello-world"),
        ("  Hello, World!  ", "hello-world"),
        ("Café au lait", "cafe-au-lait"),
        ("snake_case  and   spaces", "snake-case-and-spaces"),
        ("---Already--dashed---", "already-dashed"),
        ("!!!", ""),
    ],
)
def test_generate_slug(text: str, expected: str):
    assert generate_slug(text) == expected


def test_generate_slug_truncates_to_max_length():
    slug = generate_slug("word " * 60)
    assert len(slug) <= 100
    assert not slug.endswith("-")


@pytest.mark.parametrize("slug", ["hello-world", "abc", "post-2024"])
def test_valid_slugs(slug: str):
    assert validate_slug(slug)


@pytest.mark.parametrize("slug", ["ab", "Hello", "hello--world", "-hello", "hello_world", "a" * 101])
def test_invalid_slugs(slug: str):
    assert not validate_slug(slug)


async def test_ensure_unique_slug_appends_counter():
    taken = {"my-post", "my-post-1"}

    async def exists(slug: str) -> bool:
        return slug in taken

    assert await ensure_unique_slug("my-post", exists) == "my-post-2"
    assert await ensure_unique_slug("fresh", exists) == "fresh"
