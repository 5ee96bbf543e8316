"""Repository for the pending queue and the sent-history table."""
from __future__ import annotations

from datetime import datetime
from typing import ClassVar, List, Optional

from sqlalchemy import delete, select

from chatsync.infra.database.models.notification import (
    PendingNotification,
    SentNotification,
)
from chatsync.infra.database.repositories.base import BaseRepository

_COPIED_COLUMNS = (
    "id", "type", "title", "text", "from_user_id", "to_user_id",
    "chat_id", "message_id", "created_at",
)


class NotificationRepository(BaseRepository[PendingNotification]):
    model: ClassVar[type] = PendingNotification

    async def list_pending(self, limit: Optional[int] = None) -> List[PendingNotification]:
        stmt = select(PendingNotification).order_by(PendingNotification.created_at)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def remove_pending(self, notification_id) -> None:
        await self.session.execute(
            delete(PendingNotification).where(PendingNotification.id == notification_id)
        )

    async def archive(
        self,
        notification: PendingNotification,
        status: str,
        updated_at: datetime,
    ) -> SentNotification:
        """Write the sent-history row and drop the pending one."""
        row = SentNotification(
            **{col: getattr(notification, col) for col in _COPIED_COLUMNS},
            status=status,
            updated_at=updated_at,
        )
        self.session.add(row)
        await self.remove_pending(notification.id)
        await self.session.flush()
        return row
