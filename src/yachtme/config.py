"""Configuration management using Pydantic settings."""

from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Supabase provides the datastore, admin authentication and public image
    storage. Missing Supabase credentials are not rejected here; they surface
    as gateway failures on first use.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase Configuration
    supabase_url: str = Field(default="", validation_alias="SUPABASE_URL")
    supabase_key: str = Field(default="", validation_alias="SUPABASE_KEY")
    supabase_jwt_secret: Optional[str] = Field(
        default=None, validation_alias="SUPABASE_JWT_SECRET"
    )
    storage_bucket: str = Field(
        default="boat-images", validation_alias="SUPABASE_STORAGE_BUCKET"
    )

    # Chat relay (automation webhook)
    chat_webhook_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CHAT_WEBHOOK_URL", "N8N_WEBHOOK_URL"),
    )
    chat_timeout_seconds: float = Field(default=30.0, validation_alias="CHAT_TIMEOUT_SECONDS")
    chat_rate_limit: str = Field(default="20/minute", validation_alias="CHAT_RATE_LIMIT")

    # Admin authorization
    admin_emails: str = Field(default="", validation_alias="ADMIN_EMAILS")

    # Internationalization
    default_locale: str = Field(default="it", validation_alias="DEFAULT_LOCALE")
    supported_locales: str = Field(default="it,en", validation_alias="SUPPORTED_LOCALES")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000", validation_alias="CORS_ORIGINS"
    )

    @computed_field
    @property
    def admin_email_list(self) -> List[str]:
        """Lowercased admin allow-list."""
        return [e.strip().lower() for e in self.admin_emails.split(",") if e.strip()]

    @computed_field
    @property
    def locale_list(self) -> List[str]:
        """Supported locales, default locale first."""
        locales = [loc.strip() for loc in self.supported_locales.split(",") if loc.strip()]
        if self.default_locale not in locales:
            locales.insert(0, self.default_locale)
        return locales


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
