"""Configuration management for Inbox Responder.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GMAIL_SCOPE_MODIFY = "https://www.googleapis.com/auth/gmail.modify"


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the INBOX_RESPONDER_ prefix (e.g., INBOX_RESPONDER_GOOGLE_CLIENT_ID).
    """

    model_config = SettingsConfigDict(
        env_prefix="INBOX_RESPONDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OAuth / session secrets. Missing values put the app in a "not configured" state.
    google_client_id: str | None = Field(
        default=None,
        description="OAuth client identifier issued by Google",
    )
    google_client_secret: str | None = Field(
        default=None,
        description="OAuth client secret issued by Google",
    )
    session_secret: str | None = Field(
        default=None,
        description="Secret used to sign the session cookie",
    )
    base_url: str = Field(
        default="http://localhost:8000",
        description="Canonical public URL of the web app, used for the OAuth redirect",
    )

    # Gmail Configuration
    gmail_user_id: str = Field(
        default="me",
        description="Gmail user id for API calls",
    )
    gmail_max_results: int = Field(
        default=15,
        description="Maximum number of unread messages fetched per refresh",
    )
    gmail_scopes: list[str] = Field(
        default_factory=lambda: ["openid", "email", GMAIL_SCOPE_MODIFY],
        description=(
            "OAuth scopes requested at sign-in. gmail.modify is needed to send "
            "replies and update labels."
        ),
    )
    gmail_credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="Path to Gmail API client secrets file (CLI only)",
    )
    gmail_token_path: Path = Field(
        default=Path("token.json"),
        description="Path to Gmail API token file (CLI only)",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    host: str = Field(default="127.0.0.1", description="Bind address for `serve`")
    port: int = Field(default=8000, description="Bind port for `serve`")

    @property
    def is_configured(self) -> bool:
        """Whether all secrets needed for the web sign-in flow are present."""
        return bool(self.google_client_id and self.google_client_secret and self.session_secret)

    @property
    def oauth_redirect_uri(self) -> str:
        return f"{self.base_url.rstrip('/')}/auth/callback"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
