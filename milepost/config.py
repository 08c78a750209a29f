"""Milepost configuration.

Settings come from environment variables prefixed with ``MILEPOST_``.
For local development a ``.env`` file can be used by pointing
``MILEPOST_ENV_FILE`` at it.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from milepost.application import DEFAULT_ROOT_TITLE


class Settings(BaseSettings):
    """Runtime settings for the server, client and CLI."""

    model_config = SettingsConfigDict(
        env_prefix="MILEPOST_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    data_file: Path = Field(default=Path("data") / "roadmap.json")
    seed_on_init: bool = Field(default=True)

    # Server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3001, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Client
    api_url: str = Field(default="http://localhost:3001/api")

    # Roadmap behaviour
    default_title: str = Field(default=DEFAULT_ROOT_TITLE)
    strict_transitions: bool = Field(default=False)

    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process."""
    env_file: Optional[str] = os.environ.get("MILEPOST_ENV_FILE")
    if env_file:
        return Settings(_env_file=env_file)
    return Settings()
