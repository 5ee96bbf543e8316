"""
chatsync.config.sync – reconciliation and scheduling knobs.

Env:
    SYNC_PAGE_SIZE                   – provider page size, default 100
    SYNC_LOOKBACK_DAYS               – start_date window for the per-minute job, default 7 (0 = off)
    SYNC_ACTIVITY_GRACE_FACTOR       – multiple of record length a record stays active, default 3
    NOTIFICATION_QUIESCENCE_SECONDS  – min message age before a push, default 60
    NOTIFICATION_AUDIT_DROPPED       – write "removed" history rows for dropped notifications
    RECORD_SYNC_INTERVAL             – seconds, default 60
    CHAT_SYNC_INTERVAL               – seconds, default 300
    NOTIFICATION_INTERVAL            – seconds, default 60
    CELERY_BROKER_URL                – default redis://localhost:6379/0
    CELERY_RESULT_BACKEND            – default: same as broker
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from chatsync.config._env import (
    env_bool,
    env_int,
    env_str,
    validate_nonnegative_int,
    validate_positive_int,
)


@dataclass(frozen=True)
class SyncConfig:
    page_size: int = 100
    lookback_days: int = 7
    activity_grace_factor: int = 3
    quiescence_seconds: int = 60
    audit_dropped_notifications: bool = False

    record_sync_interval: int = 60
    chat_sync_interval: int = 300
    notification_interval: int = 60

    broker_url: str = "redis://localhost:6379/0"
    result_backend: Optional[str] = None

    def __post_init__(self) -> None:
        validate_positive_int(self.page_size, "page_size")
        validate_nonnegative_int(self.lookback_days, "lookback_days")
        validate_positive_int(self.activity_grace_factor, "activity_grace_factor")
        validate_nonnegative_int(self.quiescence_seconds, "quiescence_seconds")
        validate_positive_int(self.record_sync_interval, "record_sync_interval")
        validate_positive_int(self.chat_sync_interval, "chat_sync_interval")
        validate_positive_int(self.notification_interval, "notification_interval")

    @classmethod
    def from_env(cls, **overrides: object) -> SyncConfig:
        broker = env_str(overrides, "broker_url", "CELERY_BROKER_URL", "redis://localhost:6379/0")
        return cls(
            page_size=env_int(overrides, "page_size", "SYNC_PAGE_SIZE", 100),
            lookback_days=env_int(overrides, "lookback_days", "SYNC_LOOKBACK_DAYS", 7),
            activity_grace_factor=env_int(
                overrides, "activity_grace_factor", "SYNC_ACTIVITY_GRACE_FACTOR", 3,
            ),
            quiescence_seconds=env_int(
                overrides, "quiescence_seconds", "NOTIFICATION_QUIESCENCE_SECONDS", 60,
            ),
            audit_dropped_notifications=env_bool(
                overrides, "audit_dropped_notifications", "NOTIFICATION_AUDIT_DROPPED", False,
            ),
            record_sync_interval=env_int(overrides, "record_sync_interval", "RECORD_SYNC_INTERVAL", 60),
            chat_sync_interval=env_int(overrides, "chat_sync_interval", "CHAT_SYNC_INTERVAL", 300),
            notification_interval=env_int(
                overrides, "notification_interval", "NOTIFICATION_INTERVAL", 60,
            ),
            broker_url=broker or "redis://localhost:6379/0",
            result_backend=env_str(overrides, "result_backend", "CELERY_RESULT_BACKEND", None),
        )


def load_sync_config(**overrides: object) -> SyncConfig:
    return SyncConfig.from_env(**overrides)
