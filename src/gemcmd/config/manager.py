# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/config/manager.py

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Final

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from gemcmd.core.merge import ConflictPolicy
from gemcmd.system.exceptions import ConfigError


# ---- Constants ----

USER_CFG: Final = "gemcmd.yml"
COMMANDS_DIR_ENV: Final = "GEMCMD_COMMANDS_DIR"
DEFAULT_COMMANDS_DIR: Final = Path.home() / ".gemini" / "commands"
DEFAULT_BACKUP_NAME: Final = "commands_backup"
DEFAULT_EXPORT_NAME: Final = "commands_export.json"


def _get_user_config_search_paths() -> tuple[Path, ...]:
    """Get config file search paths (ordered by priority: lowest to highest).

    Evaluated at call time so tests can redirect the environment.
    """
    return (
        Path("/etc/gemcmd") / USER_CFG,
        Path.home() / ".config" / "gemcmd" / USER_CFG,
        Path(os.getenv("XDG_CONFIG_HOME", "")) / "gemcmd" / USER_CFG,
        Path(os.getenv("GEMCMD_CONFIG_HOME", "")) / USER_CFG,
    )


def _load_merged_config_data(candidates: tuple[Path, ...]) -> dict:
    """Load and merge config data from candidate paths.

    Later files override earlier ones. Unlike a project config, a missing
    user config is not an error: every field has a default.

    Raises:
        ConfigError: If a config file exists but cannot be parsed
    """
    merged_data = {}
    found_configs = []

    for candidate in candidates:
        # Unset env vars produce relative "gemcmd/gemcmd.yml"-style candidates
        if not candidate.is_absolute() or not candidate.exists():
            continue
        try:
            with candidate.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config from {candidate}: {e}")
            raise ConfigError(f"Cannot read config {candidate}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config {candidate} must contain a mapping, got {type(data).__name__}")

        merged_data.update(data)
        found_configs.append(str(candidate))
        logger.debug(f"Loaded config from {candidate}")

    if found_configs:
        logger.debug(f"Merged config from: {', '.join(found_configs)}")
    else:
        logger.debug("No gemcmd.yml found, using defaults")
    return merged_data


# ---- User Config Model ----

class StoreConfig(BaseModel):
    """Where the command store lives and how the CLI behaves by default."""
    commands_dir: Path = Field(default_factory=lambda: DEFAULT_COMMANDS_DIR)
    backup_name: str = DEFAULT_BACKUP_NAME
    export_name: str = DEFAULT_EXPORT_NAME

    # Optional logging configuration
    local_log: Optional[Path] = None

    # Used by import/restore when the user passes no --on-conflict
    default_conflict_policy: Optional[ConflictPolicy] = None

    @field_validator("commands_dir", "local_log", mode="before")
    @classmethod
    def expand_home(cls, value):
        if isinstance(value, str):
            return Path(value).expanduser()
        if isinstance(value, Path):
            return value.expanduser()
        return value

    @field_validator("backup_name")
    @classmethod
    def backup_name_is_plain(cls, value: str) -> str:
        if not value or "/" in value or value in (".", ".."):
            raise ValueError(f"backup_name must be a plain directory name, got {value!r}")
        return value

    @property
    def backup_dir(self) -> Path:
        """The single backup snapshot sits next to the commands directory."""
        return self.commands_dir.parent / self.backup_name

    @classmethod
    def load(cls, config_path: Path) -> "StoreConfig":
        """Load config from a single file."""
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config {config_path} must contain a mapping, got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e

    def save(self, config_path: Path) -> None:
        """Write the config as YAML, omitting unset optional fields."""
        config_dict = self.model_dump(mode="json", exclude_none=True)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w", encoding="utf-8") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)


def load_store_config() -> StoreConfig:
    """Load and merge user config from all locations, then apply env overrides."""
    merged_data = _load_merged_config_data(_get_user_config_search_paths())

    env_dir = os.getenv(COMMANDS_DIR_ENV)
    if env_dir:
        merged_data["commands_dir"] = env_dir

    try:
        return StoreConfig.model_validate(merged_data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e


# ---- Validation Function ----

def validate_config(config: StoreConfig) -> list[str]:
    """Return a list of validation errors. Empty list means config is valid."""
    errors = []

    commands_dir = config.commands_dir
    if not commands_dir.is_absolute():
        errors.append(f"commands_dir must be absolute: {commands_dir}")
    elif commands_dir.exists() and not commands_dir.is_dir():
        errors.append(f"commands_dir exists but is not a directory: {commands_dir}")

    if config.backup_dir.exists() and not config.backup_dir.is_dir():
        errors.append(f"backup path exists but is not a directory: {config.backup_dir}")

    if config.local_log:
        log_path = config.local_log
        if not log_path.is_absolute():
            errors.append(f"local_log path must be absolute: {log_path}")
        elif log_path.exists() and not log_path.is_dir():
            errors.append(f"local_log path exists but is not a directory: {log_path}")

    return errors


# done.
