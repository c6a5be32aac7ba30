"""
storefront_core.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the client layer.
- Offer a cached settings instance for the composition roots.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Every value can be overridden with a `STOREFRONT_*` environment variable.
    """

    model_config = SettingsConfigDict(env_prefix="STOREFRONT_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "storefront-core"
    log_level: str = "INFO"

    # Backend
    api_base_url: str = "http://localhost:5000/api"
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    tenant_header: str = "X-Store-ID"

    # Durable client storage; "memory://" keeps everything in-process.
    storage_url: str = "sqlite:///./storefront.db"

    # Navigation
    login_path: str = "/login"

    # Tenancy
    reserved_subdomains: tuple[str, ...] = ("www", "localhost", "127")

    # Cart
    default_stock_ceiling: int = Field(default=99, ge=0)

    # Session
    session_retry_delay_seconds: float = Field(default=1.0, ge=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests construct `Settings(env="test", ...)` directly instead of going through the cache.
