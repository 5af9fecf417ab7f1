"""Directory API settings and configuration.

Supports environment-specific configuration with validation.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me-in-production"


class Environment(str, Enum):
    """Deployment environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class RuntimeSettings(BaseModel):
    """HTTP server settings."""

    host: str = "127.0.0.1"
    port: int = 3001
    log_level: str = "info"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class AuthSettings(BaseModel):
    """Authentication settings."""

    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET)
    jwt_algorithm: str = "HS256"
    token_ttl_minutes: int = Field(default=60, ge=1)
    issuer: str = "unidir"
    protected_entities: list[str] = Field(
        default_factory=lambda: [
            "university",
            "course",
            "ielts",
            "pte",
            "requirements",
            "users",
        ]
    )
    sweep_interval_seconds: float = Field(default=3600.0, gt=0)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    bootstrap_email: str | None = None
    bootstrap_password: str | None = None


class StorageSettings(BaseModel):
    """Storage settings."""

    backend: str = "memory"  # memory, postgres
    postgres_url: str | None = None
    postgres_pool_size: int = 10

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in {"memory", "postgres"}:
            raise ValueError(f"Unknown storage backend: {v}")
        return v


class LoggingSettings(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    json_output: bool = True


class Settings(BaseSettings):
    """Main directory API settings.

    Loaded from environment variables with UNIDIR_ prefix, and from a
    ``.env`` file in the working directory when one exists.
    """

    model_config = SettingsConfigDict(
        env_prefix="UNIDIR_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    env: Environment = Environment.DEVELOPMENT

    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="after")
    def validate_jwt_secret(self) -> "Settings":
        if self.is_production() and self.auth.jwt_secret == DEFAULT_JWT_SECRET:
            raise ValueError("JWT secret must be changed in production")
        return self

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == Environment.PRODUCTION


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Load settings from the environment.

    Args:
        env_file: .env file to read instead of ``./.env``

    Returns:
        Loaded settings
    """
    if env_file is not None:
        return Settings(_env_file=env_file)
    return Settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return load_settings()
