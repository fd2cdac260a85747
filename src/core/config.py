"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # GraphQL data service (Hasura) that owns the users_bookmarks table
    hasura_api_endpoint: str = Field(validation_alias="HASURA_API_ENDPOINT")
    upstream_timeout: float = Field(default=10.0, validation_alias="UPSTREAM_TIMEOUT")

    # Session tokens - shared secret with the identity provider
    nextauth_secret: str = Field(default="", validation_alias="NEXTAUTH_SECRET")
    session_cookie_name: str = Field(
        default="next-auth.session-token",
        validation_alias="SESSION_COOKIE_NAME",
    )

    # Display locale - shared with frontend (NEXT_PUBLIC_ prefix for Next.js exposure)
    locale: Literal["en", "tr"] = Field(default="en", validation_alias="NEXT_PUBLIC_LOCALE")

    # Translation author used when a request doesn't name one
    default_author_id: int = Field(default=105, validation_alias="DEFAULT_AUTHOR_ID")

    # Quiescence period before the bookmark panel re-runs a search
    search_debounce_seconds: float = Field(
        default=0.5,
        validation_alias="SEARCH_DEBOUNCE_SECONDS",
    )

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        validation_alias="CORS_ORIGINS",
    )

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
