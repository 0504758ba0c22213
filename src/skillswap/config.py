"""Application settings via pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables with SKILLSWAP_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="SKILLSWAP_",
        env_file=".env",
        case_sensitive=False,
    )

    # --- Core ---
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    log_level: str = "INFO"
    log_format: str = "json"

    # --- Record store ---
    store_backend: Literal["json", "sql"] = "json"
    data_dir: str = "data"
    database_url: str = "sqlite+aiosqlite:///data/skillswap.db"
    database_auto_create: bool = True

    # --- Rate limiting (disabled when redis_url is unset) ---
    redis_url: str | None = None
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 900

    # --- JWT ---
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_private_key_path: str = "keys/jwt_private.pem"
    jwt_public_key_path: str = "keys/jwt_public.pem"
    jwt_expire_days: int = 7
    jwt_issuer: str = "skillswap"

    # --- Passwords ---
    password_min_length: int = 6
    password_max_length: int = 128

    # --- Uploads ---
    upload_dir: str = "uploads"
    max_photo_bytes: int = 5 * 1024 * 1024

    # --- Bootstrap admin (seeded on startup when both are set) ---
    admin_email: str | None = None
    admin_password: str | None = None
    admin_name: str = "Administrator"

    # --- Activity windows ---
    active_user_window_days: int = 30
    new_user_window_days: int = 7

    # --- Listings ---
    default_page_size: int = 20
    max_page_size: int = 100
    dashboard_recent_items: int = 10


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
