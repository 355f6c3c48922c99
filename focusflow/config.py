# -*- coding: utf-8 -*-
"""
Process-level configuration, read from the environment.

User-facing preferences (durations, theme, weekly goal) are not here: they are
AppSettings, persisted in the key-value store and edited from the UI.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_positive_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {value}")
    return value


@dataclass
class AppConfig:
    data_dir: Path
    db_path: Path
    sounds_dir: Path
    log_file: Path
    log_level: str = "INFO"
    log_to_file: bool = True
    streak_lookback_days: int = 3650
    external_poll_ms: int = 2000

    @classmethod
    def from_env(cls, data_dir: Optional[Path] = None) -> "AppConfig":
        base = data_dir or Path(os.getenv("FOCUSFLOW_DATA_DIR", str(Path.home() / ".focusflow")))
        base = base.expanduser()

        level = os.getenv("FOCUSFLOW_LOG_LEVEL", "INFO").strip().upper()
        if level not in _LEVELS:
            raise ValueError(f"FOCUSFLOW_LOG_LEVEL must be one of {', '.join(_LEVELS)}")

        return cls(
            data_dir=base,
            db_path=Path(os.getenv("FOCUSFLOW_DB_PATH", str(base / "focusflow.db"))).expanduser(),
            sounds_dir=Path(os.getenv("FOCUSFLOW_SOUNDS_DIR", str(base / "sounds"))).expanduser(),
            log_file=Path(os.getenv("FOCUSFLOW_LOG_FILE", str(base / "logs" / "focusflow.log"))).expanduser(),
            log_level=level,
            log_to_file=_env_bool("FOCUSFLOW_LOG_TO_FILE", True),
            streak_lookback_days=_env_positive_int("FOCUSFLOW_STREAK_LOOKBACK_DAYS", 3650),
            external_poll_ms=_env_positive_int("FOCUSFLOW_EXTERNAL_POLL_MS", 2000),
        )

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

    def ensure_directories(self) -> None:
        for path in (self.data_dir, self.db_path.parent, self.sounds_dir):
            path.mkdir(parents=True, exist_ok=True)
        if self.log_to_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
