from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_SENDER = "no-reply@taskflow.local"


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    """Load ``.env`` and then ``.env.<APP_ENV>``; the second one wins."""
    env_name = os.getenv("APP_ENV", "development")
    search_dirs = [Path.cwd(), PROJECT_ROOT]

    base_file = next((d / ".env" for d in search_dirs if (d / ".env").exists()), None)
    if base_file:
        load_dotenv(base_file)

    env_file = next(
        (d / f".env.{env_name}" for d in search_dirs if (d / f".env.{env_name}").exists()),
        None,
    )
    if env_file:
        load_dotenv(env_file, override=True)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    log_dir: str = "logs"
    sql_echo: bool = False
    notifications_enabled: bool = True
    notification_sender: str = DEFAULT_SENDER

    @classmethod
    def from_env(cls) -> Settings:
        database_url = os.getenv("DATABASE_URL", "").strip()
        if not database_url:
            raise RuntimeError("DATABASE_URL is not set. Create a .env file with your connection string.")
        return cls(
            database_url=database_url,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR", "logs"),
            sql_echo=_env_flag("SQL_ECHO", False),
            notifications_enabled=_env_flag("NOTIFICATIONS_ENABLED", True),
            notification_sender=os.getenv("NOTIFICATION_SENDER", "").strip() or DEFAULT_SENDER,
        )


load_env()

SETTINGS = Settings.from_env()
