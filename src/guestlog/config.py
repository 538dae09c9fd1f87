"""Configuration via environment variables with Pydantic Settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Guest log configuration loaded from environment variables."""

    model_config = {"env_prefix": "GUESTLOG_"}

    # Server
    host: str = "127.0.0.1"
    port: int
    log_level: Literal["critical", "error", "warning", "info", "debug"] = "info"

    # Shared secret expected in the x-auth header
    auth: str = Field(min_length=1)

    # Guest accounts file, created on first access
    dest_file: Path

    # Validate the whole append payload before writing any of it
    atomic_append: bool = False
