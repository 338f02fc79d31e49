"""Configuration management for the cache guard and bundled stores."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


ROOT = Path(__file__).resolve().parents[1]


class RestSettings(BaseModel):
    base_url: str = "http://127.0.0.1:8000/api"
    timeout_seconds: int = Field(default=30, gt=0)
    max_attempts: int = Field(default=3, ge=1)
    api_token: str | None = None

    @field_validator("api_token")
    @classmethod
    def normalize_api_token(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("base_url must not be empty")
        return value.strip().rstrip("/")


class Settings(BaseSettings):
    """Top-level configuration values for storeguard."""

    cache_seconds: int = Field(default=600, ge=0)
    rest: RestSettings = Field(default_factory=RestSettings)

    model_config = {
        "env_prefix": "STOREGUARD_",
        "env_file": ROOT / ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = ["RestSettings", "Settings", "get_settings"]
