"""
record_authz.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECORD_AUTHZ_", case_sensitive=False)

    # Environment controls dev-only surfaces (identity switcher, token minting, seeding).
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "record-authz"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "record-authz"
    jwt_audience: str = "record-authz-api"
    jwt_secret: str = Field(default="dev-secret-change-me-please-32-bytes", repr=False)
    # Test identity the server-side provider starts with (None = anonymous).
    initial_identity: str | None = None

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./record_authz.db"
    seed_forecast_count: int = Field(default=5, ge=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Policies and handlers are code-defined (see `auth.app_policies`) and deliberately
# not configurable through the environment.
