"""
Application configuration management.

Uses pydantic-settings for type-safe environment variable parsing.
All configuration is centralized here to support dependency injection
and avoid scattering os.getenv() calls throughout the codebase.

Two groups of values live here:
- Ambient service settings (environment, server, boot mode, logging)
- Commerce signals: optional credentials and URLs that decide which
  backend modules are composed at startup. These are kept as plain
  optional strings so that reading them never fails; shape checks
  happen later, during composition.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BootMode = Literal["strict", "permissive"]


class Settings(BaseSettings):
    """
    Application settings with validation and type coercion.

    Values are loaded from environment variables or .env file.
    All fields have sensible defaults for local development.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Core project signals
    database_url: Optional[str] = None
    redis_url: Optional[str] = None
    medusa_worker_mode: Optional[str] = None
    backend_public_url: Optional[str] = None
    medusa_disable_admin: Optional[str] = None

    # HTTP policy and auth secrets
    admin_cors: Optional[str] = None
    auth_cors: Optional[str] = None
    store_cors: Optional[str] = None
    jwt_secret: Optional[str] = None
    cookie_secret: Optional[str] = None

    # File storage (MinIO)
    minio_endpoint: Optional[str] = None
    minio_access_key: Optional[str] = None
    minio_secret_key: Optional[str] = None
    minio_bucket: Optional[str] = None

    # Notification providers
    sendgrid_api_key: Optional[str] = None
    sendgrid_from_email: Optional[str] = None
    resend_api_key: Optional[str] = None
    resend_from_email: Optional[str] = None

    # Payments (Stripe)
    stripe_api_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None

    # Search plugin (MeiliSearch)
    meilisearch_host: Optional[str] = None
    meilisearch_admin_key: Optional[str] = None

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 9000
    debug: bool = False

    # Boot behaviour
    # None means "derive from environment" (see effective_boot_mode)
    boot_mode: Optional[BootMode] = None
    log_config_on_boot: bool = True
    log_level: str = "INFO"

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    @field_validator("boot_mode", mode="before")
    @classmethod
    def _blank_boot_mode(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def effective_boot_mode(self) -> BootMode:
        """
        Boot mode used by the module assembler.

        Explicit BOOT_MODE wins. Otherwise development boots permissively
        (missing core fields become empty strings) and every other
        environment boots strictly.
        """
        if self.boot_mode is not None:
            return self.boot_mode
        return "permissive" if self.is_development else "strict"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings singleton.

    Use this function to get settings instance throughout the application.
    The @lru_cache ensures we only parse environment once.
    """
    return Settings()
