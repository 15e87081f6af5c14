"""Configuration management for the interview engine."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    # Environment variables should be set directly
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")
    SUPABASE_SCHEMA: str = Field(default="public", description="Postgres schema holding the tables")

    # Environment
    INTERVIEW_ENGINE_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")
    LOG_LEVEL: str | None = Field(
        default=None, description="Overrides the environment's default log level"
    )

    # Individual interviews
    ACCESS_CODE_MAX_ATTEMPTS: int = Field(
        default=10, description="Attempts at generating a unique interview access code"
    )

    # Numeric part scoring
    DEFAULT_NUMERIC_MIN: float = Field(
        default=0, description="Lower bound used when a numeric part has no options.min"
    )
    DEFAULT_NUMERIC_MAX: float = Field(
        default=100, description="Upper bound used when a numeric part has no options.max"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
