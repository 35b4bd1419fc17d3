"""
Centralized configuration for the Zamar web API.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., STRIPE_*, LANGGRAPH_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Zamar Web API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Zamar backend (source of truth for users, songs, setlists and credits)
    backend_api_url: str = "http://localhost:4000"
    http_timeout: float = 30.0  # seconds

    # Public web front-end (for Stripe redirects)
    web_url: str = "http://localhost:3000"

    # Admin access
    admin_email: str = ""
    admin_roles: list[str] = ["admin"]
    impersonation_header: str = "X-Impersonation-Token"

    # Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    backend_webhook_secret: str = ""  # Falls back to stripe_webhook_secret
    stripe_webhook_tolerance: int = 300  # seconds

    # LangGraph lyric-search agent
    langgraph_url: str = "https://deepagents-langgraph-production.up.railway.app"
    langgraph_api_key: str = ""
    langgraph_assistant_id: str = "cerebras_zamar"
    langgraph_recursion_limit: int = 100

    # User-facing message language
    locale: str = "he"

    @property
    def credit_webhook_secret(self) -> str:
        """Secret sent to the backend's credit-add endpoint."""
        return self.backend_webhook_secret or self.stripe_webhook_secret


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
