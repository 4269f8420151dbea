# src/event_planner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every key has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "PLANNER"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Console ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path
    storage_key: str

    # ---- Domain defaults ----
    user_id: str
    default_budget_total: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "event-planner").strip() or "event-planner"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/event_planner"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.json")
        storage_key = _env(_k("STORAGE_KEY"), "tasks").strip() or "tasks"

        user_id = _env(_k("USER_ID"), "user-1").strip() or "user-1"
        default_budget_total = _env_float(_k("DEFAULT_BUDGET_TOTAL"), 10000.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            storage_path=storage_path,
            storage_key=storage_key,
            user_id=user_id,
            default_budget_total=default_budget_total,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
