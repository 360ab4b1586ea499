"""
Configuration management for the NC case notification service.
"""
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    environment: str = "development"

    # Database (Neon deployments export NEON_DATABASE_URL)
    database_url: str = Field(
        default="sqlite:///./nc_case_notify.db",
        validation_alias=AliasChoices("DATABASE_URL", "NEON_DATABASE_URL"),
    )
    database_ssl_mode: str = "require"

    # Free tier: number of cases a single email may monitor
    free_tier_case_limit: int = 1

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Frontend URL (for CORS and the pricing link)
    frontend_url: str = "http://localhost:5173"
    pricing_path: str = "/pricing"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def is_development() -> bool:
    """Check if error details may be returned to API callers."""
    return get_settings().environment.strip().lower() == "development"


def get_pricing_url() -> str:
    """Absolute URL of the pricing view shown when the free tier is used up."""
    settings = get_settings()
    return settings.frontend_url.rstrip("/") + settings.pricing_path
