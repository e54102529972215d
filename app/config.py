"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class AppSettings:
    """
    Process-wide settings.
    """

    environment: str
    log_level: str


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    return AppSettings(
        environment=_get_str_env("ENVIRONMENT", "local").lower(),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )


@dataclass(frozen=True)
class PlanningSettings:
    """
    Runtime settings for the planning grid.

    The default window applies when a grid request omits year or months.
    """

    upsert_batch_size: int = 500
    default_year: int = 2026
    default_start_month: int = 1
    default_end_month: int = 12


@lru_cache(maxsize=1)
def get_planning_settings() -> PlanningSettings:
    """
    Return cached planning settings.
    """

    return PlanningSettings(
        upsert_batch_size=max(1, _get_int_env("PLANNING_UPSERT_BATCH_SIZE", 500)),
        default_year=_get_int_env("PLANNING_DEFAULT_YEAR", date.today().year),
        default_start_month=_get_int_env("PLANNING_DEFAULT_START_MONTH", 1),
        default_end_month=_get_int_env("PLANNING_DEFAULT_END_MONTH", 12),
    )
