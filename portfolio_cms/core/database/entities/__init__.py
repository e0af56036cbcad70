"""
Database entities.

Importing this package registers every table with ``SQLModel.metadata``.
"""

from .admin_users import AdminUser
from .audit_logs import AuditLog
from .blog_posts import BlogPost
from .case_studies import CaseStudy
from .chatbot import ChatbotConversation, ChatbotKnowledge, ChatbotQuestion, ChatbotSettings
from .contact_messages import ContactMessage
from .experience import ExperienceEntry
from .projects import Project
from .site import ContentSection, NavigationItem, SiteSetting, SocialLink
from .skills import SkillCategory, Tool

ALL_ENTITIES = (
    AdminUser,
    BlogPost,
    CaseStudy,
    Project,
    SkillCategory,
    Tool,
    ExperienceEntry,
    NavigationItem,
    SocialLink,
    ContentSection,
    SiteSetting,
    ChatbotKnowledge,
    ChatbotQuestion,
    ChatbotSettings,
    ChatbotConversation,
    ContactMessage,
    AuditLog,
)

__all__ = [
    "ALL_ENTITIES",
    "AdminUser",
    "AuditLog",
    "BlogPost",
    "CaseStudy",
    "ChatbotConversation",
    "ChatbotKnowledge",
    "ChatbotQuestion",
    "ChatbotSettings",
    "ContactMessage",
    "ContentSection",
    "ExperienceEntry",
    "NavigationItem",
    "Project",
    "SiteSetting",
    "SkillCategory",
    "SocialLink",
    "Tool",
]
