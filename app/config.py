# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides:
# - Settings: every environment-driven value, validated at startup
# - PipelineConfig: the frozen subset the request pipeline needs, resolved
#   once and passed explicitly into the assembler
#
# Usage:
#   from app.config import settings
#   config = settings.pipeline_config()
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PACKAGE_DIR = Path(__file__).resolve().parent

Environment = Literal["development", "test", "staging", "production"]


class PipelineConfig(BaseModel):
    """
    Everything the pipeline assembler needs, resolved once at startup.

    Environment-conditional behavior is expressed as plain fields here so
    no stage ever looks at the process environment.
    """
    model_config = ConfigDict(frozen=True)

    environment: Environment = "development"
    is_production: bool = False
    canonical_host: Optional[str] = None
    verbose_errors: bool = False

    session_secret: str = Field(min_length=16)
    session_cookie_name: str = "campsite.sid"
    session_ttl_seconds: int = 14 * 24 * 60 * 60

    public_dir: Path = PROJECT_ROOT / "public"
    views_dir: Path = PACKAGE_DIR / "views"
    view_engine: str = "jinja2"
    static_max_age_ms: int = 86_400_000

    csp_report_only: bool = False
    gzip_minimum_size: int = 1000

    @property
    def static_max_age_seconds(self) -> int:
        return self.static_max_age_ms // 1000


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Server
    # -------------------------------------------------------------------------

    ENVIRONMENT: Environment = Field(
        default="development",
        validation_alias=AliasChoices("NODE_ENV", "ENVIRONMENT"),
        description="Deployment mode (NODE_ENV takes precedence over ENVIRONMENT)"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Log level when DEBUG is off"
    )

    HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to"
    )

    PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port to listen on"
    )

    CANONICAL_HOST: str = Field(
        default="www.freecodecamp.com",
        description="Hostname every request is redirected to in production"
    )

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------
    # Sessions and users live in Redis. "memory://" keeps everything in the
    # process, which is handy for local development without Redis.

    DATABASE_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis URL for the session and user stores"
    )

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    SESSION_SECRET: str = Field(
        default="dev-session-secret-change-in-production",
        min_length=16,
        description="Secret used to sign session cookies"
    )

    SESSION_COOKIE_NAME: str = Field(
        default="campsite.sid",
        description="Name of the session cookie"
    )

    SESSION_TTL_SECONDS: int = Field(
        default=14 * 24 * 60 * 60,
        ge=60,
        description="How long an idle session is kept in the store"
    )

    # -------------------------------------------------------------------------
    # Assets
    # -------------------------------------------------------------------------

    PUBLIC_DIR: Path = Field(
        default=PROJECT_ROOT / "public",
        description="Directory served as static files (LESS compiled in place)"
    )

    STATIC_MAX_AGE_MS: int = Field(
        default=86_400_000,
        ge=0,
        description="Cache lifetime for static files, in milliseconds"
    )

    CSP_REPORT_ONLY: bool = Field(
        default=False,
        description="Only report Content-Security-Policy violations"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def uses_memory_store(self) -> bool:
        return self.DATABASE_URL.startswith("memory://")

    def pipeline_config(self) -> PipelineConfig:
        """
        Resolve the pipeline configuration.

        Production forces the canonical host; only development shows
        verbose error pages.
        """
        return PipelineConfig(
            environment=self.ENVIRONMENT,
            is_production=self.is_production,
            canonical_host=self.CANONICAL_HOST if self.is_production else None,
            verbose_errors=self.is_development,
            session_secret=self.SESSION_SECRET,
            session_cookie_name=self.SESSION_COOKIE_NAME,
            session_ttl_seconds=self.SESSION_TTL_SECONDS,
            public_dir=self.PUBLIC_DIR,
            static_max_age_ms=self.STATIC_MAX_AGE_MS,
            csp_report_only=self.CSP_REPORT_ONLY,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
