from __future__ import annotations

from typing import Self

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.constants import GH_BINARY

# .env is read once at import so every BaseSettings subclass sees it.
load_dotenv()


class ExecutorSettings(BaseSettings):
    """gh subprocess settings. Env vars prefixed with GHMCP_."""

    model_config = SettingsConfigDict(env_prefix="GHMCP_")

    gh_binary: str = GH_BINARY
    default_timeout_s: float = Field(30.0, gt=0)
    download_timeout_s: float = Field(300.0, gt=0)  # long_running tools
    kill_grace_s: float = Field(2.0, ge=0)  # SIGTERM → SIGKILL delay

    @model_validator(mode="after")
    def _validate(self) -> Self:
        if self.download_timeout_s < self.default_timeout_s:
            raise ValueError(
                f"download_timeout_s ({self.download_timeout_s}) must be >= "
                f"default_timeout_s ({self.default_timeout_s})"
            )
        return self


class LogSettings(BaseSettings):
    """Logging settings. Env vars prefixed with GHMCP_LOG_."""

    model_config = SettingsConfigDict(env_prefix="GHMCP_LOG_")

    level: str = "INFO"
    json_output: bool = False

    @field_validator("level")
    @classmethod
    def _validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        v = v.upper()
        if v not in allowed:
            msg = f"GHMCP_LOG_LEVEL must be one of {sorted(allowed)} (got '{v}')"
            raise ValueError(msg)
        return v


class Settings(BaseSettings):
    """Root settings composing all sub-configurations."""

    model_config = SettingsConfigDict(extra="ignore")

    executor: ExecutorSettings = Field(default_factory=ExecutorSettings)
    log: LogSettings = Field(default_factory=LogSettings)


def get_settings() -> Settings:
    """Load and validate settings. Raises ValidationError on invalid values."""
    return Settings()
