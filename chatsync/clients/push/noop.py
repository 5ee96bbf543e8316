"""No-op push sender: used when Firebase is not configured."""
from __future__ import annotations

import logging

from chatsync.clients.push.base import BasePushSender, PushMessage

logger = logging.getLogger(__name__)


class NoOpPushSender(BasePushSender):
    """Delivers nothing. Every send reports failure so the item is archived as ``failed``."""

    @property
    def provider(self) -> str:
        return "noop"

    async def send(self, token: str, message: PushMessage) -> bool:
        logger.warning("Push not delivered, no gateway configured: %r", message.title)
        return False
