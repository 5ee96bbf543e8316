"""Firebase Cloud Messaging push sender."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin import exceptions as firebase_exceptions

from chatsync.clients.push.base import BasePushSender, PushMessage
from chatsync.config.firebase import FirebaseConfig

logger = logging.getLogger(__name__)


def _get_or_init_app(config: FirebaseConfig) -> firebase_admin.App:
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass
    options = {"projectId": config.project_id} if config.project_id else None
    if config.credentials_path:
        cred = credentials.Certificate(config.credentials_path)
        return firebase_admin.initialize_app(cred, options)
    logger.warning("FCM: no service account file, using application default credentials")
    return firebase_admin.initialize_app(options=options)


class FCMPushSender(BasePushSender):
    def __init__(
        self,
        config: FirebaseConfig,
        *,
        app: Optional[firebase_admin.App] = None,
    ) -> None:
        self._config = config
        self._app = app or _get_or_init_app(config)

    @property
    def provider(self) -> str:
        return "fcm"

    def _build(self, token: str, message: PushMessage) -> messaging.Message:
        return messaging.Message(
            token=token,
            notification=messaging.Notification(title=message.title, body=message.body),
            data=dict(message.data),
            android=messaging.AndroidConfig(
                priority="high",
                notification=messaging.AndroidNotification(
                    channel_id=self._config.android_channel_id,
                    priority="high",
                    default_sound=True,
                    default_vibrate_timings=True,
                ),
            ),
            apns=messaging.APNSConfig(
                payload=messaging.APNSPayload(
                    aps=messaging.Aps(
                        alert=messaging.ApsAlert(title=message.title, body=message.body),
                        sound="default",
                        badge=1,
                    ),
                ),
            ),
        )

    async def send(self, token: str, message: PushMessage) -> bool:
        fcm_message = self._build(token, message)
        loop = asyncio.get_running_loop()
        try:
            message_id = await loop.run_in_executor(
                None, lambda: messaging.send(fcm_message, app=self._app),
            )
        except (firebase_exceptions.FirebaseError, ValueError) as exc:
            logger.warning("FCM: send failed: %s", exc)
            return False
        logger.debug("FCM: sent message %s", message_id)
        return True
