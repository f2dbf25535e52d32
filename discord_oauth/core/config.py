"""
OAuth Callback Configuration

Centralized configuration management using Pydantic Settings.
All environment variables are loaded once into an immutable `OAuthSettings` value,
which is then injected into the flow service instead of being read ad hoc.
"""

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..utils.scopes import parse_scopes
from ..utils.security_mask import SensitiveDataFilter

DEFAULT_REQUIRED_SCOPES = "identify applications.commands gdm.join"
DEFAULT_LOG_FORMAT = "%(asctime)s,p%(process)s,{%(filename)s:%(lineno)d},%(levelname)s,%(message)s"


class OAuthSettings(BaseSettings):
    """Callback service settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
        frozen=True,
    )

    # ==================== Client Credentials ====================
    # Required for the flow; empty means "not configured"
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""

    # ==================== Flow Settings ====================
    required_scopes: str = DEFAULT_REQUIRED_SCOPES
    success_redirect_url: str = "https://discord.com/app"
    callback_path: str = "/api/oauth"
    response_mode: str = "json"  # json, html

    # ==================== Provider Endpoints ====================
    discord_api_endpoint: str = "https://discord.com/api/v10"
    discord_authorize_url: str = "https://discord.com/oauth2/authorize"
    http_timeout_seconds: float = 10.0

    # ==================== Logging Settings ====================
    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT

    @field_validator("response_mode")
    @classmethod
    def validate_response_mode(cls, v: str) -> str:
        """Validate response mode value."""
        allowed = ["json", "html"]
        if v.lower() not in allowed:
            raise ValueError(f"response_mode must be one of {allowed}, got '{v}'")
        return v.lower()

    @field_validator("callback_path")
    @classmethod
    def validate_callback_path(cls, v: str) -> str:
        """Ensure the callback path is absolute."""
        v = v.strip() or "/api/oauth"
        return v if v.startswith("/") else f"/{v}"

    @property
    def required_scope_list(self) -> list[str]:
        """Required scopes in configured order, duplicates removed."""
        return parse_scopes(self.required_scopes)

    def missing_credentials(self) -> list[str]:
        """Return the environment variable names of absent required values."""
        missing = []
        if not self.client_id:
            missing.append("CLIENT_ID")
        if not self.client_secret:
            missing.append("CLIENT_SECRET")
        if not self.redirect_uri:
            missing.append("REDIRECT_URI")
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_credentials()

    def configure_logging(self) -> None:
        """Configure application-wide logging with consistent format and level.

        This should be called once at application startup. Individual modules use
        logging.getLogger(__name__); every root handler gets the redaction filter so
        secrets are masked before reaching any sink.
        """
        numeric_level = getattr(logging, self.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=numeric_level,
            format=self.log_format,
            force=True,  # Override any existing configuration
        )
        for handler in logging.getLogger().handlers:
            handler.addFilter(SensitiveDataFilter())


@lru_cache
def get_settings() -> OAuthSettings:
    """Return the process-wide settings instance, loaded on first use."""
    return OAuthSettings()
