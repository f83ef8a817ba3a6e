# storefront_http_api/config.py

"""
Configuration for the storefront HTTP API.

All tunables are read from environment variables (or a local ``.env``
file) through pydantic-settings, so a deployment only has to export the
values it wants to change.

Typical usage
=============

    from storefront_http_api.config import get_settings

    settings = get_settings()
    engine = create_engine(settings.DATABASE_URL)

Tests replace the active settings with ``set_settings`` instead of
patching the environment.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class StorageBackend(str, Enum):
    FILESYSTEM = "filesystem"
    S3 = "s3"


class Settings(BaseSettings):
    """
    Central configuration registry, validated by pydantic.
    """

    # --- Application Meta ---
    APP_NAME: str = "storefront-publishing"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    CORS_ORIGINS: str = "http://localhost:3000"

    # --- Security ---
    # Shared secret presented by the upstream gateway that asserts identity.
    API_SECRET: Optional[str] = None

    # --- Logging & Observability ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    OTEL_SERVICE_NAME: str = "storefront-api"
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None

    # --- Persistence ---
    DATABASE_URL: str = "sqlite:///./storefront.db"
    AUTO_CREATE_TABLES: bool = True

    # --- Object storage ---
    STORAGE_BACKEND: StorageBackend = StorageBackend.FILESYSTEM
    FILESYSTEM_STORAGE_PATH: str = "./media"
    STORAGE_PUBLIC_BASE_URL: str = "http://localhost:8000/media"

    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_REGION: str = "us-east-1"
    S3_ENDPOINT_URL: Optional[str] = None

    POSTS_BUCKET: str = "blog-images"
    PRODUCTS_BUCKET: str = "product-images"

    # --- Upload limits ---
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    MAX_PRODUCT_IMAGES: int = 10

    # --- Listings ---
    POSTS_PAGE_SIZE: int = 10
    PRODUCTS_PAGE_SIZE: int = 12
    MAX_PAGE_SIZE: int = 100
    FEATURED_LIMIT: int = 8

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origins(self) -> List[str]:
        """
        Parse CORS_ORIGINS (comma-separated, or "*") into a list.
        """
        raw = (self.CORS_ORIGINS or "").strip()
        if not raw or raw == "*":
            return ["*"]
        return [p.strip() for p in raw.split(",") if p.strip()]

    @property
    def api_prefix(self) -> str:
        """Normalized prefix: "" or "/something" without a trailing slash."""
        prefix = (self.API_PREFIX or "").strip().rstrip("/")
        if prefix and not prefix.startswith("/"):
            prefix = "/" + prefix
        return prefix


_SETTINGS: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Return the active Settings, building them from the environment on
    first use.
    """
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings()
    return _SETTINGS


def set_settings(settings: Optional[Settings]) -> None:
    """
    Replace the active Settings (``None`` forces a reload on next access).

    Mainly useful for tests.
    """
    global _SETTINGS
    _SETTINGS = settings


__all__ = ["AppEnv", "StorageBackend", "Settings", "get_settings", "set_settings"]
