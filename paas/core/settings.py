from __future__ import annotations

import logging
import os
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_GIT_HOST = "tsuru.plataformas.glb.com"


class PlatformSettings(BaseSettings):
    """
    Platform-level settings for the application lifecycle core.

    This is separate from paas.db.config.Settings, which focuses on the database layer.
    """

    # Repository provisioning
    HOME: str = Field(
        default_factory=lambda: os.path.expanduser("~"),
        description="Home directory anchoring the git root (<HOME>/../git).",
    )
    GIT_HOST: str = Field(
        default=DEFAULT_GIT_HOST,
        description="Remote host used to build repository URLs (git@<host>:<app>.git).",
    )
    GIT_ROOT: Optional[str] = Field(
        default=None,
        description="If provided, directory holding the repositories instead of <HOME>/../git.",
    )

    # Logging
    LOG_LEVEL: int = Field(default=logging.INFO, description="Root log level (name or number)")

    # Environment label
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _parse_log_level(cls, v):
        """
        Accept both level names (INFO, debug) and numeric levels.
        """
        if v is None or v == "":
            return logging.INFO
        if isinstance(v, str):
            if v.strip().isdigit():
                return int(v)
            level = logging.getLevelName(v.strip().upper())
            if not isinstance(level, int):
                raise ValueError(f"Unknown log level: {v}")
            return level
        return v

    @field_validator("GIT_HOST")
    @classmethod
    def _require_git_host(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("GIT_HOST must not be empty")
        return v


# PUBLIC_INTERFACE
def get_platform_settings() -> PlatformSettings:
    """
    Return a new PlatformSettings instance populated from environment variables.

    The home directory is read once per instance; build the repository
    provisioner from a single instance to keep paths stable for a process.
    """
    return PlatformSettings()
