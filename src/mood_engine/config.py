"""Application configuration."""

import os
from datetime import tzinfo
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_STORAGE_PATH = "~/.config/mood_engine/state.json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["file", "memory", "supabase"] = "file"
    storage_path: str = DEFAULT_STORAGE_PATH
    timezone: str | None = None
    history_days: int = 7
    poll_interval_seconds: float = 2.0
    chat_context_size: int = 5
    inference_url: str | None = None
    inference_token: str | None = None
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_store: bool = False
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "app_state"
    supabase_scope: str = "default"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Return the configured zone, or None for the system local zone."""
    if name is None:
        return None
    cleaned = name.strip()
    if not cleaned:
        return None
    return ZoneInfo(cleaned)


def resolve_storage_path(raw: str) -> Path:
    """Expand a configured storage path."""
    return Path(raw).expanduser().resolve()
