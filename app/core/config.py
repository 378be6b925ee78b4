# python
# app/core/config.py
"""Configuration settings for the File Storage API.

Uses Pydantic BaseSettings for environment variable management.
"""
import secrets
from enum import Enum

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


ASYNC_POSTGRES_SCHEME = "postgresql+asyncpg://"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ===== Application Settings =====
    app_name: str = Field(default="File Storage API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Security Settings =====
    secret_key: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        validation_alias=AliasChoices("secret_key", "jwt_secret"),
        description="Secret key for signing session tokens",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    access_token_expire_hours: int = Field(default=24, description="Session token lifetime")
    bcrypt_rounds: int = Field(default=10, description="bcrypt work factor")

    # ===== Database Settings =====
    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("database_url", "postgres_url"),
        description="Database connection URL",
    )
    db_host: str = Field(default="postgres", description="Database host")
    db_user: str = Field(default="fileapp", description="Database user")
    db_password: str = Field(default="password123", description="Database password")
    db_name: str = Field(default="fileapp", description="Database name")
    db_port: int = Field(default=5432, description="Database port")
    db_ssl: bool = Field(default=False, description="Require TLS for the database connection")

    # ===== File Storage Settings =====
    upload_dir: str = Field(default="./uploads", description="Directory holding uploaded files")
    max_upload_size: int = Field(
        default=10 * 1024 * 1024, description="Maximum upload size in bytes (10MB)"
    )
    frontend_build_dir: str = Field(
        default="build", description="Directory with a pre-built client bundle"
    )

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="*", description="Allowed CORS origins (comma-separated)"
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== Server Settings =====
    host: str = Field(default="0.0.0.0", description="Host to bind the server")
    port: int = Field(default=3001, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def database_url_resolved(self) -> str:
        """Connection URL for the async engine.

        A full ``DATABASE_URL`` wins; otherwise the URL is assembled from the
        discrete ``DB_*`` settings.
        """
        if self.database_url:
            url = self.database_url.strip()
            for prefix in ("postgres://", "postgresql://"):
                if url.startswith(prefix):
                    return ASYNC_POSTGRES_SCHEME + url[len(prefix):]
            return url

        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        ).render_as_string(hide_password=False)

    @property
    def uses_connection_string(self) -> bool:
        return bool(self.database_url)

    @property
    def secret_key_configured(self) -> bool:
        return "secret_key" in self.model_fields_set

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator("max_upload_size")
    @classmethod
    def validate_upload_size(cls, v):
        if v <= 0:
            raise ValueError("Maximum upload size must be positive")
        return v

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v):
        if not 4 <= v <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        return v


settings = Settings()


def get_config_summary(config: Settings = settings) -> dict:
    """Non-secret view of the configuration, safe to log."""
    return {
        "app_name": config.app_name,
        "version": config.version,
        "environment": config.environment.value,
        "database": "connection string" if config.uses_connection_string else config.db_host,
        "secret_key_configured": config.secret_key_configured,
        "upload_dir": config.upload_dir,
        "max_upload_size": config.max_upload_size,
    }


__all__ = [
    "settings",
    "Settings",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
]
