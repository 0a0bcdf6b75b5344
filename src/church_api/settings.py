"""
church_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret, Cloudinary credentials).
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `CHURCH_`).

    The JWT secret has no default: the app factory refuses to build an app
    without one.
    """

    model_config = SettingsConfigDict(env_prefix="CHURCH_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "church-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 4000

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "church-api"
    jwt_audience: str = "church-api-clients"
    jwt_secret: str = Field(default="", repr=False)
    token_ttl_minutes: int = Field(default=60, ge=1)
    identity_strategy: Literal["refetch", "claims"] = "refetch"
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./church.db"
    db_connect_attempts: int = Field(default=20, ge=1)
    db_connect_backoff_seconds: float = Field(default=2.0, ge=0)

    # Pagination
    default_page_limit: int = 10
    max_page_limit: int = 100

    # Blob storage (event images)
    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = Field(default=None, repr=False)
    cloudinary_api_secret: str | None = Field(default=None, repr=False)
    cloudinary_folder: str = "events"
    max_image_bytes: int = 5 * 1024 * 1024

    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.cloudinary_cloud_name and self.cloudinary_api_key and self.cloudinary_api_secret
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars; the running app keeps its own copy on app.state.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Request handlers read settings from `app.state.settings` (see `api.deps.settings_dep`)
# so tests can build an app with injected settings without touching the environment.
