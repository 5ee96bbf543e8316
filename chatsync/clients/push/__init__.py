"""Push gateway senders. ``build_push_sender`` picks FCM when Firebase is configured."""
from __future__ import annotations

import logging
from typing import Optional

from chatsync.clients.push.base import BasePushSender, PushMessage
from chatsync.clients.push.noop import NoOpPushSender
from chatsync.config.firebase import FirebaseConfig, load_firebase_config

logger = logging.getLogger(__name__)


def build_push_sender(config: Optional[FirebaseConfig] = None) -> BasePushSender:
    config = config or load_firebase_config()
    if not config.enabled:
        logger.warning("Firebase is not configured; pushes will be archived as failed")
        return NoOpPushSender()
    from chatsync.clients.push.fcm import FCMPushSender
    return FCMPushSender(config)


__all__ = ["BasePushSender", "PushMessage", "NoOpPushSender", "build_push_sender"]
