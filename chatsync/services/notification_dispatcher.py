"""NotificationDispatcher: decide the fate of one pending notification.

Per sweep an item is either dropped (recipient or message gone, message
already read), held (message still being edited), or finished (pushed, or
marked sent without a push when the recipient can't receive one). Finished
items move to sent-history; dropped items are deleted, and only leave a
``removed`` history row when dropped-notification auditing is on.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

from chatsync.clients.push import BasePushSender, PushMessage
from chatsync.infra.database.models.notification import PendingNotification
from chatsync.infra.database.repositories.chat import MessageRepository
from chatsync.infra.database.repositories.identity import UserRepository
from chatsync.infra.database.repositories.notification import NotificationRepository
from chatsync.types import DispatchOutcome, MessageStatus, NotificationStatus

logger = logging.getLogger(__name__)

DEFAULT_QUIESCENCE = timedelta(seconds=60)


def _str(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def build_push_message(notification: PendingNotification) -> PushMessage:
    data: Dict[str, str] = {
        "id": _str(notification.id),
        "type": _str(notification.type),
        "title": _str(notification.title),
        "text": _str(notification.text),
        "fromUserId": _str(notification.from_user_id),
        "toUserId": _str(notification.to_user_id),
        "chatId": _str(notification.chat_id),
        "messageId": _str(notification.message_id),
        "createdAt": _str(notification.created_at),
        "updatedAt": _str(notification.updated_at),
    }
    return PushMessage(title=notification.title or "", body=notification.text or "", data=data)


class NotificationDispatcher:
    def __init__(
        self,
        notifications: NotificationRepository,
        users: UserRepository,
        messages: MessageRepository,
        push_sender: BasePushSender,
        *,
        quiescence: timedelta = DEFAULT_QUIESCENCE,
        audit_dropped: bool = False,
    ) -> None:
        self._notifications = notifications
        self._users = users
        self._messages = messages
        self._push = push_sender
        self._quiescence = quiescence
        self._audit_dropped = audit_dropped

    async def _drop(self, notification: PendingNotification, now: datetime, reason: str) -> DispatchOutcome:
        logger.info("Notification %s dropped: %s", notification.id, reason)
        if self._audit_dropped:
            await self._notifications.archive(notification, NotificationStatus.REMOVED.value, now)
        else:
            await self._notifications.remove_pending(notification.id)
        return DispatchOutcome.REMOVED

    async def _message_gate(
        self, notification: PendingNotification, now: datetime,
    ) -> Optional[str]:
        """Return a drop reason, ``"held"``, or None when the message allows a push."""
        message = await self._messages.get_in_chat(notification.chat_id, notification.message_id)
        if message is None:
            return "message not found"
        if message.status == MessageStatus.READ.value:
            return "message already read"
        if now - message.updated_at < self._quiescence:
            return "held"
        return None

    async def dispatch(self, notification: PendingNotification, now: datetime) -> DispatchOutcome:
        recipient = await self._users.get_by_id(notification.to_user_id)
        if recipient is None:
            return await self._drop(notification, now, "recipient not found")

        if notification.chat_id is not None and notification.message_id is not None:
            gate = await self._message_gate(notification, now)
            if gate == "held":
                logger.debug("Notification %s held: message updated recently", notification.id)
                return DispatchOutcome.HELD
            if gate is not None:
                return await self._drop(notification, now, gate)

        if not recipient.push_token or recipient.notifications_enabled is False:
            await self._notifications.archive(notification, NotificationStatus.SENT.value, now)
            logger.debug("Notification %s closed without push (user %s)", notification.id, recipient.id)
            return DispatchOutcome.SENT_WITHOUT_PUSH

        delivered = await self._push.send(recipient.push_token, build_push_message(notification))
        if delivered:
            await self._notifications.archive(notification, NotificationStatus.SENT.value, now)
            logger.info("Notification %s pushed to user %s", notification.id, recipient.id)
            return DispatchOutcome.SENT

        await self._notifications.archive(notification, NotificationStatus.FAILED.value, now)
        logger.warning("Notification %s push failed (user %s)", notification.id, recipient.id)
        return DispatchOutcome.FAILED
