"""
Admin routes for the portfolio resources managed through the generic CRUD surface.

Projects and case studies get unique slugs generated from their titles; the
remaining resources are plain soft-deletable rows in display order.
"""

from portfolio_cms.core.cache.invalidation import (
    invalidate_case_study_cache,
    invalidate_chatbot_cache,
    invalidate_project_cache,
    invalidate_site_cache,
)
from portfolio_cms.core.database.entities.case_studies import CaseStudy
from portfolio_cms.core.database.entities.chatbot import ChatbotKnowledge, ChatbotQuestion
from portfolio_cms.core.database.entities.experience import ExperienceEntry
from portfolio_cms.core.database.entities.projects import Project
from portfolio_cms.core.database.entities.site import ContentSection, NavigationItem, SocialLink
from portfolio_cms.core.database.entities.skills import SkillCategory, Tool
from portfolio_cms.core.database.repositories import (
    CaseStudyRepository,
    ChatbotKnowledgeRepository,
    ChatbotQuestionRepository,
    ProjectRepository,
)
from portfolio_cms.core.models.io.case_studies import CaseStudyCreate, CaseStudyRead, CaseStudyUpdate
from portfolio_cms.core.models.io.chatbot import (
    ChatbotKnowledgeCreate,
    ChatbotKnowledgeRead,
    ChatbotKnowledgeUpdate,
    ChatbotQuestionCreate,
    ChatbotQuestionRead,
    ChatbotQuestionUpdate,
)
from portfolio_cms.core.models.io.experience import ExperienceCreate, ExperienceRead, ExperienceUpdate
from portfolio_cms.core.models.io.projects import ProjectCreate, ProjectRead, ProjectUpdate
from portfolio_cms.core.models.io.site import (
    ContentSectionCreate,
    ContentSectionRead,
    ContentSectionUpdate,
    NavigationItemCreate,
    NavigationItemRead,
    NavigationItemUpdate,
    SkillCategoryCreate,
    SkillCategoryRead,
    SkillCategoryUpdate,
    SocialLinkCreate,
    SocialLinkRead,
    SocialLinkUpdate,
    ToolCreate,
    ToolRead,
    ToolUpdate,
)

from .crud import build_crud_router

projects_router = build_crud_router(
    model=Project,
    create_schema=ProjectCreate,
    update_schema=ProjectUpdate,
    read_schema=ProjectRead,
    resource="project",
    label="Project",
    tag="admin-projects",
    json_fields=("technologies",),
    filter_fields=("category", "status", "featured"),
    slug_source="title",
    repository=ProjectRepository,
    on_change=invalidate_project_cache,
)

case_studies_router = build_crud_router(
    model=CaseStudy,
    create_schema=CaseStudyCreate,
    update_schema=CaseStudyUpdate,
    read_schema=CaseStudyRead,
    resource="case_study",
    label="Case study",
    tag="admin-case-studies",
    json_fields=("metrics", "results", "tools", "timeline"),
    filter_fields=("category", "featured"),
    slug_source="title",
    repository=CaseStudyRepository,
    on_change=invalidate_case_study_cache,
)

skills_router = build_crud_router(
    model=SkillCategory,
    create_schema=SkillCategoryCreate,
    update_schema=SkillCategoryUpdate,
    read_schema=SkillCategoryRead,
    resource="skill_category",
    label="Skill category",
    tag="admin-skills",
    json_fields=("skills",),
    search_fields=("title", "description"),
)

tools_router = build_crud_router(
    model=Tool,
    create_schema=ToolCreate,
    update_schema=ToolUpdate,
    read_schema=ToolRead,
    resource="tool",
    label="Tool",
    tag="admin-tools",
    search_fields=("name", "description", "category"),
    filter_fields=("category",),
)

experience_router = build_crud_router(
    model=ExperienceEntry,
    create_schema=ExperienceCreate,
    update_schema=ExperienceUpdate,
    read_schema=ExperienceRead,
    resource="experience",
    label="Experience entry",
    tag="admin-experience",
    json_fields=("achievements",),
    search_fields=("title", "company", "category"),
    filter_fields=("type", "category"),
)

navigation_router = build_crud_router(
    model=NavigationItem,
    create_schema=NavigationItemCreate,
    update_schema=NavigationItemUpdate,
    read_schema=NavigationItemRead,
    resource="navigation_item",
    label="Navigation item",
    tag="admin-navigation",
    search_fields=("title", "href"),
    filter_fields=("is_section",),
)

social_links_router = build_crud_router(
    model=SocialLink,
    create_schema=SocialLinkCreate,
    update_schema=SocialLinkUpdate,
    read_schema=SocialLinkRead,
    resource="social_link",
    label="Social link",
    tag="admin-social-links",
    search_fields=("platform", "url"),
    filter_fields=("platform",),
)

content_router = build_crud_router(
    model=ContentSection,
    create_schema=ContentSectionCreate,
    update_schema=ContentSectionUpdate,
    read_schema=ContentSectionRead,
    resource="content_section",
    label="Content section",
    tag="admin-content",
    json_fields=("metadata",),
    field_map={"metadata": "section_metadata"},
    search_fields=("section_name", "content"),
    filter_fields=("section_name",),
    on_change=invalidate_site_cache,
)

knowledge_router = build_crud_router(
    model=ChatbotKnowledge,
    create_schema=ChatbotKnowledgeCreate,
    update_schema=ChatbotKnowledgeUpdate,
    read_schema=ChatbotKnowledgeRead,
    resource="chatbot_knowledge",
    label="Knowledge item",
    tag="admin-chatbot",
    json_fields=("tags",),
    filter_fields=("category", "source_type"),
    repository=ChatbotKnowledgeRepository,
    on_change=invalidate_chatbot_cache,
)

questions_router = build_crud_router(
    model=ChatbotQuestion,
    create_schema=ChatbotQuestionCreate,
    update_schema=ChatbotQuestionUpdate,
    read_schema=ChatbotQuestionRead,
    resource="chatbot_question",
    label="Question",
    tag="admin-chatbot",
    filter_fields=("category",),
    repository=ChatbotQuestionRepository,
    on_change=invalidate_chatbot_cache,
)
