"""Application settings."""

from functools import lru_cache
import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "actor-runner"
    host: str = "0.0.0.0"
    port: int = Field(default=0, ge=0, le=65535)
    log_level: str = "INFO"
    upstream_base_url: str = "https://api.apify.com/v2"
    upstream_timeout_s: float | None = Field(default=None, gt=0.0)
    poll_interval_s: float = Field(default=5.0, ge=0.0)
    max_poll_attempts: int = Field(default=60, ge=1)
    result_limit: int = Field(default=10, ge=0)
    poll_transport_retries: int = Field(default=0, ge=0)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(
        env_prefix="ACTOR_RUNNER_",
        extra="ignore",
        env_file=(PROJECT_ROOT / ".env", PROJECT_ROOT / ".env.local"),
        env_file_encoding="utf-8",
    )

    def resolved_port(self) -> int:
        if self.port:
            return self.port
        raw = os.getenv("PORT", "").strip()
        return int(raw) if raw.isdigit() else 3000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
