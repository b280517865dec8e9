from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Names used by existing deployments: CONTEXT_CHUNK_SIZE and DEBUG
    chunk_size: int = Field(
        default=2000,
        ge=1,
        validation_alias=AliasChoices("KB_CHUNK_SIZE", "CONTEXT_CHUNK_SIZE"),
    )
    debug_mode: bool = Field(
        default=False,
        validation_alias=AliasChoices("KB_DEBUG", "DEBUG"),
    )
    fetch_timeout_seconds: float = Field(default=30.0, gt=0)
    cache_max_age_hours: float = Field(default=24.0, gt=0)
    max_retries: int = Field(default=2, ge=0)
    default_max_results: int = Field(default=20, ge=1)
    relevance_threshold: int = Field(default=2, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="KB_",  # supports KB_FETCH_TIMEOUT_SECONDS, KB_MAX_RETRIES, etc.
        populate_by_name=True,
    )

    # Accept tolerant boolean env values and trim whitespace (e.g., "false ", "0 ")
    @field_validator("debug_mode", mode="before")
    @classmethod
    def _coerce_bool(cls, v):  # type: ignore[no-untyped-def]
        if isinstance(v, str):
            s = v.strip().lower()
            if s in ("1", "true", "yes", "on"):
                return True
            if s in ("0", "false", "no", "off", ""):
                return False
        return v

    @property
    def cache_max_age(self) -> timedelta:
        return timedelta(hours=self.cache_max_age_hours)


# Cached accessor (shared between CLI commands without re-parsing env)
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
