# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_url: str
    environment: str = "production"
    log_level: str = "info"
    log_format: Literal["json", "text"] = "json"
    database_pool_size: int = 20
    # Create the well-known system types on startup
    bootstrap_system_types: bool = True

    model_config = {"env_file": ".env"}

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        if value.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return value.lower()


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance. Lazy-loaded to avoid import-time failures."""
    return Settings()
