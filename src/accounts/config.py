"""Accounts file: discovery, YAML parsing and schema validation.

The file maps account aliases to token files::

    default_account: home
    accounts:
      home:
        token_path: ~/.config/github/tokens/personal
      work:
        token_path: ~/.config/github/tokens/work
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Self

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from src.constants import CONFIG_FILE_NAME, PROJECT_NAME
from src.infra.errors import ConfigError

logger = structlog.get_logger()


class AccountConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    token_path: str

    @field_validator("token_path")
    @classmethod
    def _validate_token_path(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("token_path must not be empty")
        return v


class AccountsConfig(BaseModel):
    """Validated accounts file. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_account: str
    accounts: dict[str, AccountConfig] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate(self) -> Self:
        if not self.accounts:
            raise ValueError("accounts mapping must not be empty")
        if self.default_account not in self.accounts:
            raise ValueError(
                f"default_account '{self.default_account}' is not one of "
                f"the configured accounts: {sorted(self.accounts)}"
            )
        return self


def _user_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / PROJECT_NAME


def candidate_paths() -> list[Path]:
    """Implicit lookup order: user config directory, then current directory."""
    return [_user_config_dir() / CONFIG_FILE_NAME, Path.cwd() / CONFIG_FILE_NAME]


def resolve_config_path(explicit: Path | None = None) -> Path:
    """Pick the accounts file: explicit path, user config dir, then cwd.

    Raises ConfigError if an explicit path does not exist or nothing is found.
    """
    if explicit is not None:
        path = explicit.expanduser()
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        return path

    candidates = candidate_paths()
    for path in candidates:
        if path.is_file():
            return path
    searched = ", ".join(str(p) for p in candidates)
    raise ConfigError(f"No config file found (searched: {searched})")


def load_config(path: Path) -> AccountsConfig:
    """Read and validate an accounts file. Raises ConfigError on any problem."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at top level")

    try:
        config = AccountsConfig.model_validate(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid config file {path}: {errors}") from e

    logger.info("config_loaded", path=str(path), accounts=sorted(config.accounts))
    return config
