"""Environment-driven settings for bigtextsearcher.

Run parameters come from the command line; these values only tune logging and
console behavior. They are read from the process environment, with a local
.env file loaded through python-dotenv so nothing has to be exported by hand.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "BIGTEXTSEARCHER_"


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "WARNING"
    file_path: Optional[str] = None
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 5


@dataclass(frozen=True)
class AppSettings:
    logging: LoggingSettings
    show_banner: bool = True


def _env(name: str) -> Optional[str]:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _env_flag(name: str) -> bool:
    raw = _env(name)
    return raw is not None and raw.lower() in {"1", "true", "yes", "on"}


def load_app_settings() -> AppSettings:
    """Load .env (if present) and build settings from the environment."""

    load_dotenv()
    logging_settings = LoggingSettings(
        level=(_env("LOG_LEVEL") or LoggingSettings.level).upper(),
        file_path=_env("LOG_FILE"),
        max_bytes=_env_int("LOG_MAX_BYTES", LoggingSettings.max_bytes),
        backup_count=_env_int("LOG_BACKUP_COUNT", LoggingSettings.backup_count),
    )
    return AppSettings(logging=logging_settings, show_banner=not _env_flag("NO_BANNER"))
