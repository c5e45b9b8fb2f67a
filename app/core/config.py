"""
Configuration management for the Absensi multi-tenant backend
"""
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Required settings
    DATABASE_URL: str = Field(..., description="Directory database URL (tenants, super admins)")
    JWT_SECRET_KEY: str = Field(..., description="JWT secret key for token signing")

    # Optional settings with defaults
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7, description="JWT token expiration in minutes")

    APP_ENV: str = Field(default="local", description="Application environment: local, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")

    # CORS settings
    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for local only."
    )

    # Wall-clock zone for "today" and lateness; timestamps are stored in UTC
    TZ: str = Field(default="Asia/Jakarta", description="Timezone of the company wall clock")

    # Multi-tenancy
    TENANT_HEADER: str = Field(default="X-Tenant-ID", description="Header carrying the tenant identifier")
    PARTITION_BACKEND: str = Field(
        default="auto",
        description="auto, schema (PostgreSQL schema per tenant) or sqlite (database per tenant)",
    )
    PARTITION_SQLITE_DIR: str = Field(
        default="./partitions",
        description="Directory for per-tenant SQLite databases; ':memory:' keeps them in memory",
    )

    SUPER_ADMIN_SETUP_KEY: str = Field(
        default="initial-setup-key",
        description="Key required to create a super admin through the setup endpoint",
    )
    FACE_MATCH_THRESHOLD: float = Field(
        default=0.6,
        description="Maximum Euclidean distance between face descriptors for a match",
    )

    # Version (can be git SHA or semver)
    VERSION: Optional[str] = Field(default=None, description="Application version (git SHA or semver)")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate APP_ENV"""
        allowed = ["local", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate LOG_LEVEL"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @field_validator("PARTITION_BACKEND")
    @classmethod
    def validate_partition_backend(cls, v: str) -> str:
        allowed = ["auto", "schema", "sqlite"]
        if v not in allowed:
            raise ValueError(f"PARTITION_BACKEND must be one of {allowed}")
        return v

    def validate_production(self) -> None:
        """
        Validate settings for production environment

        Raises:
            ValueError: If production settings are invalid
        """
        if self.APP_ENV == "prod":
            # JWT_SECRET_KEY must be at least 32 characters in production
            if len(self.JWT_SECRET_KEY) < 32:
                raise ValueError(
                    "JWT_SECRET_KEY must be at least 32 characters in production environment"
                )

            # ALLOWED_ORIGINS must not be wildcard in production
            if self.ALLOWED_ORIGINS == "*" or not self.ALLOWED_ORIGINS:
                raise ValueError(
                    "ALLOWED_ORIGINS must be explicitly set (not '*') in production environment"
                )

            if self.SUPER_ADMIN_SETUP_KEY == "initial-setup-key":
                raise ValueError(
                    "SUPER_ADMIN_SETUP_KEY must be changed in production environment"
                )

    def get_allowed_origins_list(self) -> List[str]:
        """
        Get list of allowed CORS origins

        Returns:
            List of allowed origins (or ['*'] for local)
        """
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    def resolved_partition_backend(self) -> str:
        """Partition backend to use; 'auto' follows the directory database dialect."""
        if self.PARTITION_BACKEND != "auto":
            return self.PARTITION_BACKEND
        if self.DATABASE_URL.startswith("sqlite"):
            return "sqlite"
        return "schema"


# Create settings instance
settings = Settings()

# Validate production settings if in prod
if settings.APP_ENV == "prod":
    settings.validate_production()
