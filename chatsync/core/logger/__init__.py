"""
Process logging for the API and the Celery worker.

    from chatsync.core.logger import configure
    configure()  # LOG_LEVEL, LOG_DIR, LOG_CONSOLE, ... from the environment

    logger = logging.getLogger(__name__)
    logger.info("Record sync started", extra={"staff_id": 42})
"""
from chatsync.core.logger.config import LoggerConfig
from chatsync.core.logger.formatters import JsonFormatter, PlainConsoleFormatter
from chatsync.core.logger.setup import configure

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
]
