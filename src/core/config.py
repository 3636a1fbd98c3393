"""Pusher configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into
  the CLI.
- Lets adapters (HTTP, exposition) read config the same way everywhere.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Annotated, Any

from dotenv import set_key
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_CONTENT_TYPE = "text/plain; version=0.0.4"


def get_user_config_dir() -> Path:
    """`$XDG_CONFIG_HOME/metric-pusher`, falling back to `%APPDATA%` or `~/.config`."""

    base = os.environ.get("XDG_CONFIG_HOME")
    if not base and sys.platform.startswith("win"):
        base = os.environ.get("APPDATA")
    return Path(base or Path.home() / ".config") / "metric-pusher"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Set variables in the user's global .env, keeping any others already there."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(exist_ok=True)
    for key, value in values.items():
        if value is not None:
            set_key(env_path, key, value, quote_mode="never", encoding="utf-8")
    return env_path


class PusherSettings(BaseSettings):
    """Central settings for pushing metrics.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars) without polluting the core.
    - One configuration contract shared by the CLI and the library API.
    """

    model_config = SettingsConfigDict(
        env_prefix="METRIC_PUSHER_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    endpoints: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Pushgateway base URLs (comma separated or JSON list).",
    )
    job: str | None = Field(
        default=None,
        description="Default job name used when the caller does not pass one.",
    )
    instance: str | None = Field(
        default=None,
        description="Default instance name (optional).",
    )
    content_type: str | None = Field(
        default=None,
        description=f"Payload content type; unset means '{DEFAULT_CONTENT_TYPE}'.",
    )

    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Transport timeout per request (seconds).",
    )
    join_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Budget for the whole fan-out/join (seconds). Unset waits for every delivery.",
    )
    user_agent: str = Field(
        default="metric-pusher/0.1",
        min_length=1,
        description="User-Agent sent with every push.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level for the CLI.",
    )

    @field_validator("endpoints", mode="before")
    @classmethod
    def _split_endpoints(cls, value: Any) -> Any:
        if isinstance(value, str):
            text = value.strip()
            if text.startswith("["):
                return json.loads(text)
            return [part.strip() for part in text.split(",") if part.strip()]
        return value

    @field_validator("job", "instance", "content_type", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper() or "WARNING"
