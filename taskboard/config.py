"""
TASKBOARD - Configuration
=========================
Environment-driven settings for the CLI: where the board blob lives,
which key it is stored under and how chatty logging is.
"""

import logging
import os
from dataclasses import dataclass

from .storage import STORAGE_KEY

DEFAULT_DATA_DIR = "~/.local/share/taskboard"


@dataclass(frozen=True)
class Settings:
    """
    Settings loaded from environment variables.

    Env vars:
    - TASKBOARD_DATA_DIR: directory holding the board blob. Default '~/.local/share/taskboard'
    - TASKBOARD_STORAGE_KEY: name of the blob (file stem). Default 'mini_trello_tasks'
    - TASKBOARD_LOG_LEVEL: logging level name. Default 'INFO'
    """

    data_dir: str
    storage_key: str
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _parse_level(value: str, default: str = "INFO") -> str:
    level = value.upper()
    if isinstance(logging.getLevelName(level), int):
        return level
    return default


def get_settings() -> Settings:
    """Return settings loaded from environment variables."""
    return Settings(
        data_dir=_get_env("TASKBOARD_DATA_DIR", DEFAULT_DATA_DIR),
        storage_key=_get_env("TASKBOARD_STORAGE_KEY", STORAGE_KEY),
        log_level=_parse_level(_get_env("TASKBOARD_LOG_LEVEL", "INFO")),
    )
