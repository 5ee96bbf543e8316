"""
Async engine and session factory.

The API process holds one pooled engine for its lifetime. Every scheduled job
run calls ``build_engine(use_null_pool=True)`` and ``close_engine()`` around
its own event loop, since pooled asyncpg connections are bound to the loop
that opened them.
"""
from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import urlsplit, urlunsplit

import asyncpg
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

# importing the models package registers every table on Base.metadata
from chatsync.infra.database.models import Base

if TYPE_CHECKING:
    from chatsync.config import PostgresConfig

logger = logging.getLogger(__name__)

_SAFE_DB_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _resolve_config(config: Optional["PostgresConfig"]) -> "PostgresConfig":
    if config is not None:
        return config
    from chatsync.config import load_postgres_config
    return load_postgres_config()


def _asyncpg_url(url: str) -> str:
    scheme, sep, rest = url.partition("://")
    if scheme in ("postgres", "postgresql"):
        return f"postgresql+asyncpg{sep}{rest}"
    return url


def _split_database(url: str) -> tuple[str, str]:
    """Return (database name, DSN pointing at the ``postgres`` maintenance db)."""
    parts = urlsplit(url.replace("+asyncpg", "", 1))
    name = parts.path.lstrip("/") or "postgres"
    return name, urlunsplit(parts._replace(path="/postgres"))


async def ensure_database_exists(config: Optional["PostgresConfig"] = None) -> None:
    """Create the configured database if the server doesn't have it yet."""
    name, maintenance_url = _split_database(_resolve_config(config).url)
    if name == "postgres":
        return
    if not _SAFE_DB_NAME.match(name):
        logger.warning("Not creating database with unsafe name %r", name)
        return
    try:
        conn = await asyncpg.connect(maintenance_url)
    except (OSError, asyncpg.PostgresError) as exc:
        logger.debug("Postgres unreachable, skipping database check: %s", exc)
        return
    try:
        exists = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", name)
        if not exists:
            await conn.execute(f'CREATE DATABASE "{name}"')
            logger.info("Database %s created", name)
    finally:
        await conn.close()


def build_engine(
    config: Optional["PostgresConfig"] = None,
    *,
    echo: Optional[bool] = None,
    use_null_pool: bool = False,
) -> AsyncEngine:
    """Return the process engine, creating it on first use."""
    global _engine
    if _engine is not None:
        return _engine

    config = _resolve_config(config)
    options: dict[str, Any] = {
        "echo": config.echo if echo is None else echo,
        "connect_args": {
            "server_settings": {"application_name": config.application_name, "jit": "off"},
        },
    }
    if use_null_pool:
        options["poolclass"] = NullPool
    else:
        options.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
            pool_pre_ping=True,
        )

    _engine = create_async_engine(_asyncpg_url(config.url), **options)
    logger.info("Database engine ready (%s)", "NullPool" if use_null_pool else f"pool_size={config.pool_size}")
    return _engine


def build_session_factory(
    engine: Optional[AsyncEngine] = None,
) -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            engine or build_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def init_db(
    config: Optional["PostgresConfig"] = None,
    *,
    drop_all: bool = False,
) -> None:
    """Create missing tables. Existing tables are left untouched unless drop_all is set."""
    engine = build_engine(config)
    async with engine.begin() as conn:
        if drop_all:
            logger.warning("Dropping all chatsync tables")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")


async def close_engine() -> None:
    global _engine, _session_factory
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database engine disposed")
