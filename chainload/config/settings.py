"""Runtime settings and loading."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoadSettings(BaseSettings):
    """How a load run talks to the network and reports.

    Values come from ``CHAINLOAD_*`` environment variables or a ``.env``
    file; CLI options override both.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHAINLOAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    timeout: float = Field(default=30.0, gt=0)
    max_concurrency: int | None = Field(default=None, ge=1)
    follow_redirects: bool = False
    reject_error_status: bool = False
    seed: int | None = None
    user_agent: str | None = None
    log_format: str = "text"
    verbose: bool = False

    @field_validator("log_format", mode="before")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid = {"text", "json"}
        v = str(v).lower()
        if v not in valid:
            raise ValueError(f"Invalid log format: {v}. Valid: {sorted(valid)}")
        return v


def load_settings(**overrides: Any) -> LoadSettings:
    """Build settings from the environment plus explicit overrides.

    Overrides whose value is ``None`` are ignored so unset CLI options do not
    clobber environment values.

    Priority: overrides > env vars > .env file > defaults
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    return LoadSettings(**values)

