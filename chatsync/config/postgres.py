"""
chatsync.config.postgres – database DSN and connection pool settings.

Env vars: DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT, DB_POOL_RECYCLE,
DB_ECHO, DB_APPLICATION_NAME.
"""
from __future__ import annotations

from dataclasses import dataclass

from chatsync.config._env import (
    env_bool,
    env_int,
    env_str,
    validate_nonnegative_int,
    validate_positive_int,
)

DEFAULT_DATABASE_URL = "postgresql://localhost/chatsync"
_POSTGRES_SCHEMES = ("postgresql://", "postgres://", "postgresql+asyncpg://")


@dataclass(frozen=True)
class PostgresConfig:
    """Where the ledgers live and how the API pools connections to it."""

    url: str
    """Any postgres DSN; the engine switches it to the asyncpg driver."""

    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 1800
    echo: bool = False
    application_name: str = "chatsync"

    def __post_init__(self) -> None:
        if not self.url or not self.url.startswith(_POSTGRES_SCHEMES):
            raise ValueError(f"DATABASE_URL must be a postgres DSN, got {self.url!r}")
        validate_positive_int(self.pool_size, "pool_size")
        validate_nonnegative_int(self.max_overflow, "max_overflow")
        validate_positive_int(self.pool_timeout, "pool_timeout")
        validate_positive_int(self.pool_recycle, "pool_recycle")
        if not self.application_name.strip():
            raise ValueError("application_name must be non-empty")

    @classmethod
    def from_env(cls, **overrides: object) -> PostgresConfig:
        return cls(
            url=(env_str(overrides, "url", "DATABASE_URL", DEFAULT_DATABASE_URL) or "").strip(),
            pool_size=env_int(overrides, "pool_size", "DB_POOL_SIZE", 10),
            max_overflow=env_int(overrides, "max_overflow", "DB_MAX_OVERFLOW", 20),
            pool_timeout=env_int(overrides, "pool_timeout", "DB_POOL_TIMEOUT", 30),
            pool_recycle=env_int(overrides, "pool_recycle", "DB_POOL_RECYCLE", 1800),
            echo=env_bool(overrides, "echo", "DB_ECHO", False),
            application_name=env_str(
                overrides, "application_name", "DB_APPLICATION_NAME", "chatsync",
            ) or "chatsync",
        )


def load_postgres_config(**overrides: object) -> PostgresConfig:
    """Load the database config from the environment. Raises ValueError on bad values."""
    return PostgresConfig.from_env(**overrides)
