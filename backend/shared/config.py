"""
Centralized configuration for the Taskboard backend.

All settings are loaded from environment variables with sensible defaults.
Auth components never read Settings directly; they receive an immutable
AuthConfig built once at startup.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Literal
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthConfig(BaseModel):
    """
    Process-wide auth configuration, read-only after startup.

    Injected into each auth component at construction.
    """

    jwt_secret: str = Field(..., description="HMAC key used to sign bearer tokens")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_ttl: timedelta = Field(
        default=timedelta(hours=6), description="Bearer token lifetime"
    )
    reset_token_ttl: timedelta = Field(
        default=timedelta(hours=1), description="Password reset token lifetime"
    )
    password_hash_rounds: int = Field(
        default=29000, ge=1, description="Work factor; higher is slower and stronger"
    )
    admin_invite_token: str = Field(
        default="", description="Shared secret that grants the admin role at registration"
    )

    model_config = {"frozen": True}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Taskboard API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Frontend URLs (for reset links)
    frontend_url: str = "http://localhost:5173"

    # Profile image uploads
    upload_dir: str = "uploads"
    public_url: str = "http://localhost:8000"
    max_upload_bytes: int = 5 * 1024 * 1024

    # Auth
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    access_token_ttl_minutes: int = 360
    reset_token_ttl_minutes: int = 60
    password_hash_rounds: int = 29000
    admin_invite_token: str = ""

    # Credential storage
    credential_backend: Literal["memory", "supabase"] = "memory"
    users_table: str = "users"

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    def auth_config(self) -> AuthConfig:
        """Build the immutable auth configuration from these settings."""
        return AuthConfig(
            jwt_secret=self.jwt_secret,
            jwt_algorithm=self.jwt_algorithm,
            access_token_ttl=timedelta(minutes=self.access_token_ttl_minutes),
            reset_token_ttl=timedelta(minutes=self.reset_token_ttl_minutes),
            password_hash_rounds=self.password_hash_rounds,
            admin_invite_token=self.admin_invite_token,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
