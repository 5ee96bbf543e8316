"""NotificationService: one sweep over the pending notification queue."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chatsync.clients.push import BasePushSender
from chatsync.config.sync import SyncConfig
from chatsync.infra.database.repositories.chat import MessageRepository
from chatsync.infra.database.repositories.identity import UserRepository
from chatsync.infra.database.repositories.notification import NotificationRepository
from chatsync.services.notification_dispatcher import NotificationDispatcher
from chatsync.types import NotificationStats

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(
        self,
        session: AsyncSession,
        push_sender: BasePushSender,
        config: Optional[SyncConfig] = None,
    ) -> None:
        self._session = session
        config = config or SyncConfig()
        self._notifications = NotificationRepository(session)
        self._dispatcher = NotificationDispatcher(
            self._notifications,
            UserRepository(session),
            MessageRepository(session),
            push_sender,
            quiescence=timedelta(seconds=config.quiescence_seconds),
            audit_dropped=config.audit_dropped_notifications,
        )

    async def run(self, now: datetime) -> NotificationStats:
        stats = NotificationStats()
        pending = await self._notifications.list_pending()
        if not pending:
            logger.debug("Notification sweep: queue empty")
            return stats
        logger.info("Notification sweep: %d pending", len(pending))

        for notification in pending:
            try:
                async with self._session.begin_nested():
                    outcome = await self._dispatcher.dispatch(notification, now)
            except Exception:
                logger.exception("Notification sweep: %s failed", notification.id)
                stats.errors += 1
                continue
            stats.record(outcome)

        logger.info("Notification sweep finished: %s", stats.to_dict())
        return stats
