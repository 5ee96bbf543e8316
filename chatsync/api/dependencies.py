"""FastAPI dependency providers."""
from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from chatsync.clients.booking import BaseBookingClient
from chatsync.config.sync import SyncConfig


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a transactional AsyncSession from the app-level session factory."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_booking_client(request: Request) -> BaseBookingClient:
    return request.app.state.booking_client


def get_sync_config(request: Request) -> SyncConfig:
    return getattr(request.app.state, "sync_config", None) or SyncConfig()
