"""
Centralized configuration for the Userbase backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings are namespaced (e.g., SUPABASE_*, CLOUDINARY_*).
"""

from dataclasses import dataclass
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class AuthConfig:
    """
    Read-only authentication configuration.

    Built once from Settings and injected into the token service,
    password hasher and admin resolver. Business logic never reads
    the environment directly.
    """

    jwt_secret: str
    admin_email: str = ""
    admin_password: str = ""
    jwt_algorithm: str = "HS256"
    user_token_ttl_days: int = 30
    admin_token_ttl_hours: int = 24
    bcrypt_rounds: int = 10

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_email and self.admin_password)

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return (
            f"AuthConfig(jwt_algorithm={self.jwt_algorithm!r}, "
            f"admin_configured={self.admin_configured}, "
            f"user_token_ttl_days={self.user_token_ttl_days}, "
            f"admin_token_ttl_hours={self.admin_token_ttl_hours})"
        )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Userbase API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Auth
    jwt_secret: str = ""
    admin_email: str = ""
    admin_password: str = ""
    user_token_ttl_days: int = 30
    admin_token_ttl_hours: int = 24
    bcrypt_rounds: int = 10

    # Supabase (credential store)
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    users_table: str = "users"
    supabase_db_url: str = ""  # direct Postgres URI, used by run_migrations.py

    # Cloudinary (media uploads)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    upload_timeout: float = 30.0  # seconds

    def auth_config(self) -> AuthConfig:
        """Build the read-only auth configuration."""
        return AuthConfig(
            jwt_secret=self.jwt_secret,
            admin_email=self.admin_email,
            admin_password=self.admin_password,
            user_token_ttl_days=self.user_token_ttl_days,
            admin_token_ttl_hours=self.admin_token_ttl_hours,
            bcrypt_rounds=self.bcrypt_rounds,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
