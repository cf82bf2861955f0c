"""
Runtime settings loaded from the environment (prefix ``TOOLSTEP_``).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TOOLSTEP_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "toolstep"
    log_level: str = "INFO"
    log_json: bool = False

    # Run-wide approval policy; a step context may override it per run.
    require_tool_approval: bool = False

    telemetry_enabled: bool = False
    telemetry_function_id: str | None = None

    run_store_backend: Literal["memory"] = "memory"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])


@lru_cache
def get_settings() -> Settings:
    return Settings()
