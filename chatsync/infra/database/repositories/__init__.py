"""Repositories for chatsync database."""
from chatsync.infra.database.repositories.base import BaseRepository
from chatsync.infra.database.repositories.chat import (
    BookingRecordRepository,
    ChatMappingRepository,
    ChatRepository,
    MessageRepository,
)
from chatsync.infra.database.repositories.identity import (
    IdentityMappingRepository,
    UserRepository,
)
from chatsync.infra.database.repositories.notification import NotificationRepository

__all__ = [
    "BaseRepository",
    "IdentityMappingRepository",
    "UserRepository",
    "ChatMappingRepository",
    "BookingRecordRepository",
    "ChatRepository",
    "MessageRepository",
    "NotificationRepository",
]
