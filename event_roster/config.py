"""Runtime settings, loaded from ``EVENT_ROSTER_*`` environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EVENT_ROSTER_", extra="ignore")

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    # False restores fail-fast delivery: the first listener error aborts the broadcast
    broadcast_isolate_failures: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
