# src/taskbook/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app, built once and passed explicitly.
- Bad values fall back to defaults instead of failing at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from dotenv import load_dotenv

from .tasks.task_models import DATE_MAX, DATE_MIN

ENV_PREFIX = "TASKBOOK"

DEFAULT_DATE_MIN = DATE_MIN
DEFAULT_DATE_MAX = DATE_MAX


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_date(name: str, default: date) -> date:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return datetime.strptime(raw.strip(), "%Y-%m-%d").date()
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str = "taskbook"
    log_level: str = "WARNING"
    log_dir: Path = Path("logs")

    # ---- Task file ----
    data_dir: Path = Path("data")
    data_file: Path = Path("data") / "taskbook.txt"
    strict_missing_file: bool = False
    rollback_on_save_failure: bool = True

    # ---- Input limits ----
    max_input_length: int = 2000
    max_description_length: int = 1000
    max_keyword_length: int = 100
    date_min: date = DEFAULT_DATE_MIN
    date_max: date = DEFAULT_DATE_MAX

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskbook").strip() or "taskbook"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")
        log_dir = _env_path(_k("LOG_DIR"), Path("logs"))

        data_dir = _env_path(_k("DATA_DIR"), Path("data"))
        data_file = _env_path(_k("DATA_FILE"), data_dir / f"{app_name}.txt")

        date_min = _env_date(_k("DATE_MIN"), DEFAULT_DATE_MIN)
        date_max = _env_date(_k("DATE_MAX"), DEFAULT_DATE_MAX)
        if date_min > date_max:
            date_min, date_max = DEFAULT_DATE_MIN, DEFAULT_DATE_MAX

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_dir=log_dir,
            data_dir=data_dir,
            data_file=data_file,
            strict_missing_file=_env_bool(_k("STRICT_MISSING_FILE"), False),
            rollback_on_save_failure=_env_bool(_k("ROLLBACK_ON_SAVE_FAILURE"), True),
            max_input_length=max(1, _env_int(_k("MAX_INPUT_LENGTH"), 2000)),
            max_description_length=max(1, _env_int(_k("MAX_DESCRIPTION_LENGTH"), 1000)),
            max_keyword_length=max(1, _env_int(_k("MAX_KEYWORD_LENGTH"), 100)),
            date_min=date_min,
            date_max=date_max,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings; reads .env (without overriding real env vars) on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
