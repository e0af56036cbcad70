"""
Operational I/O models.

Backups, audit logs, two-factor authentication, uploads, cache administration
and dashboard statistics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import JsonObject

# =====================================================================
# Backups
# =====================================================================


class BackupCreateRequest(BaseModel):
    type: Literal["manual", "scheduled", "pre-restore"] = "manual"
    compress: bool = False
    description: Optional[str] = Field(default=None, max_length=300)


class BackupInfo(BaseModel):
    id: str
    filename: str
    type: str
    created_at: datetime
    size: int
    compressed: bool
    checksum: str
    tables: Dict[str, int] = Field(default_factory=dict)
    description: Optional[str] = None


class BackupRestoreRequest(BaseModel):
    tables: Optional[List[str]] = Field(default=None, description="Restore only these tables; all when omitted")


class BackupRestoreResult(BaseModel):
    backup_id: str
    tables: Dict[str, int]


class BackupVerifyResult(BaseModel):
    backup_id: str
    valid: bool
    message: str


class BackupStatistics(BaseModel):
    total_backups: int
    total_size: int
    latest_backup: Optional[BackupInfo] = None
    oldest_backup: Optional[BackupInfo] = None


# =====================================================================
# Audit log
# =====================================================================


class AuditLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    action: str
    resource: str
    resource_id: Optional[str] = None
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    success: bool
    severity: str
    details: JsonObject = Field(default_factory=dict)
    ip_address: Optional[str] = None
    created_at: datetime


class AuditStats(BaseModel):
    days: int
    total_events: int
    failed_events: int
    by_action: Dict[str, int] = Field(default_factory=dict)
    by_severity: Dict[str, int] = Field(default_factory=dict)
    by_resource: Dict[str, int] = Field(default_factory=dict)


class AuditCleanupResult(BaseModel):
    retention_days: int
    deleted: int


# =====================================================================
# Two-factor authentication
# =====================================================================


class TwoFactorSetupResponse(BaseModel):
    secret: str
    provisioning_uri: str
    backup_codes: List[str] = Field(description="Shown once; store them somewhere safe")


class TwoFactorTokenRequest(BaseModel):
    token: str = Field(min_length=6, max_length=16)


class TwoFactorStatus(BaseModel):
    enabled: bool
    pending_setup: bool
    backup_codes_remaining: int


# =====================================================================
# Uploads, cache, stats
# =====================================================================


class UploadResult(BaseModel):
    filename: str
    url: str
    size: int
    type: str


class CacheInvalidateRequest(BaseModel):
    tag: Optional[str] = Field(default=None, min_length=1)
    pattern: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def _require_target(self) -> "CacheInvalidateRequest":
        if not self.tag and not self.pattern:
            raise ValueError("Either 'tag' or 'pattern' is required")
        return self


class CacheOverview(BaseModel):
    cache: Dict[str, Any]
    tags: Dict[str, int]
    queries: Dict[str, Any]


class DashboardStats(BaseModel):
    blog_posts: Dict[str, int]
    projects: int
    case_studies: int
    knowledge_items: int
    conversations: int
    recent_posts: List[Dict[str, Any]] = Field(default_factory=list)
    recent_activity: List[Dict[str, Any]] = Field(default_factory=list)
