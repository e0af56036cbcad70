"""Cache tags and the invalidation helpers called after admin writes."""

from __future__ import annotations

from portfolio_cms.core.logging_config import get_logger

from .api_cache import api_cache

logger = get_logger(__name__)

TAG_BLOGS = "blogs"
TAG_PROJECTS = "projects"
TAG_CASE_STUDIES = "case-studies"
TAG_SITE = "site"
TAG_ANALYTICS = "analytics"
TAG_CHATBOT = "chatbot"

CONTENT_TAGS = (TAG_BLOGS, TAG_PROJECTS, TAG_CASE_STUDIES, TAG_SITE, TAG_ANALYTICS, TAG_CHATBOT)


def invalidate_tags(*tags: str) -> int:
    """Invalidate every entry under the given tags and return the number removed."""
    return sum(api_cache.invalidate_by_tag(tag) for tag in tags)


def invalidate_blog_cache() -> int:
    return invalidate_tags(TAG_BLOGS, TAG_ANALYTICS)


def invalidate_project_cache() -> int:
    return invalidate_tags(TAG_PROJECTS, TAG_ANALYTICS)


def invalidate_case_study_cache() -> int:
    return invalidate_tags(TAG_CASE_STUDIES, TAG_ANALYTICS)


def invalidate_site_cache() -> int:
    return invalidate_tags(TAG_SITE)


def invalidate_chatbot_cache() -> int:
    return invalidate_tags(TAG_CHATBOT, TAG_ANALYTICS)


def invalidate_all_content() -> int:
    removed = invalidate_tags(*CONTENT_TAGS)
    logger.info(f"Invalidated all content caches ({removed} entries)")
    return removed
