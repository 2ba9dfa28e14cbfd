# src/taskpilot/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Paths default to the current directory, like any per-project to-do file.
- config_local.py may override selected values without touching the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKPILOT"

load_dotenv(override=False)


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


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


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
    log_dir: Path

    # ---- Storage ----
    tasks_path: Path
    backup_path: Path
    export_path: Path
    ensure_dirs: list[str]

    # ---- Behaviour ----
    due_soon_days: int
    color: bool

    @staticmethod
    def from_env() -> "Settings":
        tasks_path = _env_path(_k("TASKS_PATH"), Path("tasks.json"))
        return Settings(
            app_name=_env(_k("APP_NAME"), "taskpilot") or "taskpilot",
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            log_dir=_env_path(_k("LOG_DIR"), Path(".local/taskpilot")),
            tasks_path=tasks_path,
            backup_path=_env_path(
                _k("BACKUP_PATH"), tasks_path.with_name(f"{tasks_path.stem}_backup{tasks_path.suffix}")
            ),
            export_path=_env_path(_k("EXPORT_PATH"), Path("exports") / "exported_tasks.json"),
            ensure_dirs=_env_list(_k("ENSURE_DIRS"), ["exports", "docs"]),
            due_soon_days=max(0, _env_int(_k("DUE_SOON_DAYS"), 7)),
            color=_env_bool(_k("COLOR"), True) and os.getenv("NO_COLOR") is None,
        )


SETTINGS = Settings.from_env()

# ---- Optional local overrides (never committed) ----
try:
    import config_local as _config_local  # type: ignore

    if hasattr(_config_local, "TASKS_PATH"):
        object.__setattr__(SETTINGS, "tasks_path", Path(_config_local.TASKS_PATH))  # type: ignore[misc]
    if hasattr(_config_local, "BACKUP_PATH"):
        object.__setattr__(SETTINGS, "backup_path", Path(_config_local.BACKUP_PATH))  # type: ignore[misc]
    if hasattr(_config_local, "DUE_SOON_DAYS"):
        object.__setattr__(SETTINGS, "due_soon_days", int(_config_local.DUE_SOON_DAYS))  # type: ignore[misc]
    if hasattr(_config_local, "COLOR"):
        object.__setattr__(SETTINGS, "color", bool(_config_local.COLOR))  # type: ignore[misc]
except ImportError:
    pass


def get_settings() -> Settings:
    return SETTINGS
