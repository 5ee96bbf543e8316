"""Async entry points for the scheduled jobs.

Each run owns its resources: a NullPool engine (Celery calls every run
through its own ``asyncio.run``, so pooled connections can't outlive it),
one session committed at the end, and the provider client.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chatsync.clients.booking import YClientsClient
from chatsync.clients.push import build_push_sender
from chatsync.config import load_sync_config, load_yclients_config
from chatsync.core.exceptions import ConfigurationError
from chatsync.core.timeutils import utcnow
from chatsync.infra.database.engine import build_engine, build_session_factory, close_engine
from chatsync.services.chat_sync_service import ChatSyncService
from chatsync.services.notification_service import NotificationService
from chatsync.services.record_sync_service import RecordSyncService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def job_session() -> AsyncIterator[AsyncSession]:
    engine = build_engine(use_null_pool=True)
    session_factory = build_session_factory(engine)
    try:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
    finally:
        await close_engine()


def _job_booking_client() -> YClientsClient:
    config = load_yclients_config()
    if not config.default_user_token:
        raise ConfigurationError(
            "YCLIENTS_DEFAULT_USER_TOKEN is required for the scheduled record sync "
            "(records are listed without a signed-in user).",
        )
    return YClientsClient(config)


async def run_record_sync(now: Optional[datetime] = None) -> Dict[str, int]:
    client = _job_booking_client()
    try:
        async with job_session() as session:
            stats = await RecordSyncService(session, client, load_sync_config()).run(now or utcnow())
    finally:
        await client.aclose()
    return stats.to_dict()


async def run_chat_sync(now: Optional[datetime] = None) -> Dict[str, int]:
    async with job_session() as session:
        stats = await ChatSyncService(session, load_sync_config()).run(now or utcnow())
    return stats.to_dict()


async def run_notification_dispatch(now: Optional[datetime] = None) -> Dict[str, int]:
    push_sender = build_push_sender()
    async with job_session() as session:
        stats = await NotificationService(session, push_sender, load_sync_config()).run(now or utcnow())
    return stats.to_dict()
