"""
Logging settings, from code or LOG_* environment variables.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _flag(name: str, default: bool = True) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class LoggerConfig:
    level: str = "INFO"
    log_dir: Optional[str] = None
    """No file handler when unset."""

    log_file_basename: str = "chatsync"
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 5
    root_name: str = "chatsync"
    console: bool = True
    file_rotating: bool = True

    @classmethod
    def from_env(cls) -> "LoggerConfig":
        env = os.environ
        return cls(
            level=env.get("LOG_LEVEL", "INFO").upper(),
            log_dir=env.get("LOG_DIR") or None,
            log_file_basename=env.get("LOG_FILE_BASENAME", "chatsync"),
            max_bytes=int(env.get("LOG_MAX_BYTES", str(5 * 1024 * 1024))),
            backup_count=int(env.get("LOG_BACKUP_COUNT", "5")),
            root_name=env.get("LOG_ROOT_NAME", "chatsync"),
            console=_flag("LOG_CONSOLE"),
            file_rotating=_flag("LOG_FILE_ROTATING"),
        )
