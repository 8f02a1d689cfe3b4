from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Trade Journal"
    database_url: str = Field("sqlite:///./tradejournal.db", env="DATABASE_URL")

    # Without persistence every user gets a purely in-memory store.
    persistence_enabled: bool = Field(False, env="PERSISTENCE_ENABLED")
    strict_store: bool = Field(False, env="STRICT_STORE")

    default_broker_format: str = "generic"
    default_user_id: str = "local"

    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    log_level: str = Field("INFO", env="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @field_validator("database_url", mode="before")
    def expand_sqlite_path(cls, v: str) -> str:
        if v.startswith("sqlite") and "///" in v and not v.startswith("sqlite:////"):
            path = v.split("///", 1)[1]
            if path and not path.startswith("/") and path != ":memory:":
                abs_path = Path(os.getcwd()) / path
                return f"sqlite:///{abs_path}"
        return v

    @field_validator("log_level", mode="before")
    def normalize_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
