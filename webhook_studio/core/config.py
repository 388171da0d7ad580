"""Application configuration loaded from environment variables."""
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central place for strongly typed application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Webhook Studio")
    environment: Literal["development", "staging", "production"] = Field(default="development")
    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")

    database_url: str = Field(default="sqlite:///./webhook_studio.db", validation_alias="DATABASE_URL")

    webhook_timeout_seconds: float = Field(default=10.0, gt=0)
    webhook_follow_redirects: bool = Field(default=True)
    response_history_limit: int = Field(default=10, ge=1)

    session_secret: str = Field(default="change-me-in-production", validation_alias="SESSION_SECRET")
    session_algorithm: str = Field(default="HS256")
    session_ttl_seconds: int = Field(default=60 * 60 * 24, gt=0)
    remember_me_ttl_seconds: int = Field(default=60 * 60 * 24 * 30, gt=0)

    admin_email: str = Field(default="admin@example.com")
    admin_password: str = Field(default="admin123")
    user_email: str = Field(default="user@example.com")
    user_password: str = Field(default="user123")
    demo_auto_login: bool = Field(default=False)

    @model_validator(mode="after")
    def convert_database_url(self) -> "Settings":
        """Convert postgresql+psycopg:// (psycopg3) to postgresql:// (psycopg2)."""
        if self.database_url.startswith("postgresql+psycopg://"):
            self.database_url = self.database_url.replace("postgresql+psycopg://", "postgresql://")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance so downstream code can import directly."""

    return Settings()
