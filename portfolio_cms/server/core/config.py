"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class JWTConfig(BaseModel):
    """Admin session token configuration."""

    secret: str = Field(alias="JWT_SECRET", description="Secret used to sign admin tokens")
    algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM", description="Signing algorithm")
    expire_days: int = Field(default=7, alias="JWT_EXPIRE_DAYS", description="Token lifetime in days")
    issuer: str = Field(default="portfolio-cms", alias="JWT_ISSUER", description="Token issuer claim")
    audience: str = Field(default="admin-panel", alias="JWT_AUDIENCE", description="Token audience claim")
    cookie_name: str = Field(default="admin-token", alias="AUTH_COOKIE_NAME", description="Auth cookie name")
    cookie_secure: bool = Field(default=False, alias="AUTH_COOKIE_SECURE", description="Mark auth cookie as secure")

    model_config = {"populate_by_name": True}


class CacheSettings(BaseModel):
    """In-memory cache configuration."""

    enabled: bool = Field(default=True, alias="CACHE_ENABLED", description="Enable response caching")
    default_ttl: int = Field(default=3600, alias="CACHE_DEFAULT_TTL", description="Default TTL in seconds")
    max_items: int = Field(default=1000, alias="CACHE_MAX_ITEMS", description="Maximum number of cached items")
    enable_metrics: bool = Field(default=True, alias="CACHE_ENABLE_METRICS", description="Collect hit/miss metrics")
    slow_query_threshold_ms: float = Field(
        default=100.0, alias="SLOW_QUERY_THRESHOLD_MS", description="Queries slower than this are logged"
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(default="0.0.0.0", description="Server host address to bind to", alias="PORTFOLIO_SERVER_HOST")
    server_port: int = Field(default=8000, description="Server port number", alias="PORTFOLIO_SERVER_PORT")
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="PORTFOLIO_LOG_LEVEL",
    )
    environment: str = Field(default="development", description="Deployment environment name", alias="PORTFOLIO_ENV")
    log_format: str = Field(default="detailed", description="Log line format: simple, detailed or json", alias="LOG_FORMAT")
    log_file_enabled: bool = Field(default=False, alias="ENABLE_FILE_LOGGING")
    log_file_dir: str = Field(default="logs", alias="LOG_FILE_DIR")
    log_file_max_bytes: int = Field(default=5 * 1024 * 1024, gt=0, alias="LOG_FILE_MAX_BYTES")
    log_file_backup_count: int = Field(default=3, ge=0, alias="LOG_FILE_BACKUP_COUNT")

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./portfolio.db",
        description="Async database connection URL (sqlite+aiosqlite or postgresql+asyncpg)",
        alias="DATABASE_URL",
    )

    # =====================================================================
    # Admin Authentication
    # =====================================================================
    jwt_secret: str = Field(default="change-me-in-production", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expire_days: int = Field(default=7, alias="JWT_EXPIRE_DAYS")
    jwt_issuer: str = Field(default="portfolio-cms", alias="JWT_ISSUER")
    jwt_audience: str = Field(default="admin-panel", alias="JWT_AUDIENCE")
    auth_cookie_name: str = Field(default="admin-token", alias="AUTH_COOKIE_NAME")
    auth_cookie_secure: bool = Field(default=False, alias="AUTH_COOKIE_SECURE")
    admin_email: Optional[str] = Field(default=None, description="Default admin email", alias="ADMIN_EMAIL")
    admin_password: Optional[str] = Field(default=None, description="Default admin password", alias="ADMIN_PASSWORD")
    admin_name: str = Field(default="Admin", description="Default admin display name", alias="ADMIN_NAME")

    # =====================================================================
    # Cache Configuration
    # =====================================================================
    cache_enabled: bool = Field(default=True, alias="CACHE_ENABLED")
    cache_default_ttl: int = Field(default=3600, alias="CACHE_DEFAULT_TTL")
    cache_max_items: int = Field(default=1000, alias="CACHE_MAX_ITEMS")
    cache_enable_metrics: bool = Field(default=True, alias="CACHE_ENABLE_METRICS")
    slow_query_threshold_ms: float = Field(default=100.0, alias="SLOW_QUERY_THRESHOLD_MS")

    # =====================================================================
    # Rate Limiting
    # =====================================================================
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    login_rate_limit: str = Field(default="5/minute", alias="LOGIN_RATE_LIMIT")
    chat_rate_limit: str = Field(default="20/minute", alias="CHAT_RATE_LIMIT")
    newsletter_rate_limit: str = Field(default="5/minute", alias="NEWSLETTER_RATE_LIMIT")
    contact_rate_limit: str = Field(default="5/hour", alias="CONTACT_RATE_LIMIT")

    # =====================================================================
    # Site, Files and Integrations
    # =====================================================================
    site_name: str = Field(default="Portfolio", description="Fallback site name", alias="SITE_NAME")
    site_base_url: str = Field(default="http://localhost:8000", description="Public base URL", alias="SITE_BASE_URL")
    default_author: str = Field(default="Admin", description="Fallback blog author", alias="DEFAULT_AUTHOR")
    upload_dir: str = Field(default="uploads", description="Directory for uploaded files", alias="UPLOAD_DIR")
    upload_max_bytes: int = Field(default=5 * 1024 * 1024, description="Maximum upload size", alias="UPLOAD_MAX_BYTES")
    backup_dir: str = Field(default="backups", description="Directory for database backups", alias="BACKUP_DIR")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1", description="OpenAI-compatible API base URL", alias="OPENAI_BASE_URL"
    )
    llm_timeout_seconds: float = Field(default=30.0, alias="LLM_TIMEOUT_SECONDS")
    newsletter_subscribe_url: Optional[str] = Field(
        default=None, description="Beehiiv (or compatible) form subscribe URL", alias="NEWSLETTER_SUBSCRIBE_URL"
    )

    # =====================================================================
    # Monitoring
    # =====================================================================
    logfire_enabled: bool = Field(default=False, alias="LOGFIRE_ENABLED")
    logfire_token: str = Field(default="", alias="LOGFIRE_TOKEN")
    logfire_service_name: str = Field(default="portfolio-cms", alias="LOGFIRE_SERVICE_NAME")

    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def jwt(self) -> JWTConfig:
        """Get admin token configuration."""
        return JWTConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cache(self) -> CacheSettings:
        """Get cache configuration."""
        return CacheSettings.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
