from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JETFUND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_prefix: str = "/api"
    allowed_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )
    database_url: str = "sqlite+aiosqlite:///./jetfund.db"

    auth_secret: str = Field(
        default="your-secret-key-change-in-production",
        description="Shared secret for HS256 tokens issued by the sign-in frontend",
    )
    auth_algorithm: str = "HS256"
    auth_jwks_url: str | None = Field(
        default=None,
        description="JWKS endpoint; when set, tokens are verified against it instead of the secret",
    )
    auth_issuer: str | None = None
    auth_audience: str | None = None

    earnings_rate: float = Field(default=5.0, description="USD paid per approved hour")
    allow_project_reopen: bool = Field(
        default=False,
        description="Allow owners to move a rejected project back to active",
    )

    hackatime_base_url: str = "https://hackatime.hackclub.com/api/v1"
    bucky_url: str = "https://bucky.hackclub.com/"
    cdn_url: str = "https://cdn.hackclub.com/api/v3/new"
    cdn_token: str = "beans"
    http_timeout_seconds: float = 30.0

    log_level: str = "INFO"
    log_json: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
