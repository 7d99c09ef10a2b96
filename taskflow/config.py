"""
FILE: taskflow/config.py
PURPOSE: Settings loaded from TASKFLOW_* environment variables
EXPORTS:
  - Settings (frozen dataclass)
  - get_settings() -> Settings
DEPENDENCIES:
  - os, pathlib (stdlib)
NOTES:
  - Settings are read on every call so tests can monkeypatch the environment
  - Invalid values fall back to defaults rather than failing at startup

Environment:
  TASKFLOW_DATA_DIR      directory holding the task slot (default ~/.taskflow)
  TASKFLOW_STORAGE_KEY   name of the slot file, without .json (default taskflow_tasks)
  TASKFLOW_LOG_LEVEL     console log level (default WARNING)
  TASKFLOW_LOG_FILE      optional path for a debug log file
  TASKFLOW_SEED_SAMPLES  seed demo tasks into an empty store (default true)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .core.constants import DEFAULT_STORAGE_KEY

ENV_PREFIX = "TASKFLOW"

DEFAULT_DATA_DIR = Path.home() / ".taskflow"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Optional[Path]) -> Optional[Path]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_log_level(name: str, default: str) -> str:
    level = _env(name, default).upper()
    if not isinstance(logging.getLevelName(level), int):
        return default
    return level


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    storage_key: str
    log_level: str
    log_file: Optional[Path]
    seed_on_first_run: bool

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            data_dir=_env_path(_k("DATA_DIR"), DEFAULT_DATA_DIR),
            storage_key=_env(_k("STORAGE_KEY"), DEFAULT_STORAGE_KEY),
            log_level=_env_log_level(_k("LOG_LEVEL"), "WARNING"),
            log_file=_env_path(_k("LOG_FILE"), None),
            seed_on_first_run=_env_bool(_k("SEED_SAMPLES"), True),
        )


def get_settings() -> Settings:
    return Settings.from_env()
