"""
chatsync.config.firebase – Firebase Cloud Messaging config.

Env vars: FIREBASE_CREDENTIALS_PATH, FIREBASE_PROJECT_ID, FCM_ANDROID_CHANNEL_ID.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from chatsync.config._env import env_str


@dataclass(frozen=True)
class FirebaseConfig:
    credentials_path: Optional[str] = None
    """Service account JSON. When unset, application default credentials are used."""

    project_id: Optional[str] = None
    android_channel_id: str = "chat_messages"

    @property
    def enabled(self) -> bool:
        """Push delivery is configured at all (credentials file or project id)."""
        return bool(self.credentials_path or self.project_id)

    @classmethod
    def from_env(cls, **overrides: object) -> FirebaseConfig:
        return cls(
            credentials_path=env_str(overrides, "credentials_path", "FIREBASE_CREDENTIALS_PATH", None),
            project_id=env_str(overrides, "project_id", "FIREBASE_PROJECT_ID", None),
            android_channel_id=env_str(
                overrides, "android_channel_id", "FCM_ANDROID_CHANNEL_ID", "chat_messages",
            ) or "chat_messages",
        )


def load_firebase_config(**overrides: object) -> FirebaseConfig:
    return FirebaseConfig.from_env(**overrides)
