"""
Attach the console and rotating JSON file handlers to the chatsync root logger.

Modules keep using ``logging.getLogger(__name__)``; everything under the
root name inherits these handlers.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from chatsync.core.logger.config import LoggerConfig
from chatsync.core.logger.formatters import JsonFormatter, PlainConsoleFormatter


def _file_handler(config: LoggerConfig, root: logging.Logger) -> Optional[logging.Handler]:
    if not (config.file_rotating and config.log_dir and config.log_dir.strip()):
        return None
    try:
        os.makedirs(config.log_dir, exist_ok=True)
    except OSError:
        root.warning("Log dir %s not writable, logging to console only", config.log_dir)
        return None
    handler = RotatingFileHandler(
        os.path.join(config.log_dir, f"{config.log_file_basename}.log"),
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    return handler


def configure(config: Optional[LoggerConfig] = None) -> None:
    """Set up logging for this process (API lifespan, Celery worker). Safe to call again."""
    config = config or LoggerConfig.from_env()
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger(config.root_name or "chatsync")
    root.setLevel(level)
    root.propagate = False
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()

    handlers: List[logging.Handler] = []
    if config.console:
        console = logging.StreamHandler()
        console.setFormatter(PlainConsoleFormatter())
        handlers.append(console)
    file_handler = _file_handler(config, root)
    if file_handler is not None:
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
        root.addHandler(handler)
