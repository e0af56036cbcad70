"""Repositories wrapping SQLModel entities with typed query helpers."""

from .admin_users import AdminUserRepository
from .audit_logs import AuditLogRepository
from .base import AsyncBaseRepository, QueryBuilder, SlugRepository, SqlRepository
from .blog_posts import BlogPostRepository
from .chatbot import (
    ChatbotConversationRepository,
    ChatbotKnowledgeRepository,
    ChatbotQuestionRepository,
    ChatbotSettingsRepository,
)
from .content import CaseStudyRepository, ProjectRepository
from .site_settings import SiteSettingRepository

__all__ = [
    "AdminUserRepository",
    "AsyncBaseRepository",
    "AuditLogRepository",
    "BlogPostRepository",
    "CaseStudyRepository",
    "ChatbotConversationRepository",
    "ChatbotKnowledgeRepository",
    "ChatbotQuestionRepository",
    "ChatbotSettingsRepository",
    "ProjectRepository",
    "QueryBuilder",
    "SiteSettingRepository",
    "SlugRepository",
    "SqlRepository",
]
