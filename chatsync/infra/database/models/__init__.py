"""
chatsync.infra.database.models – SQLAlchemy 2.0 ORM models.

Exports Base, mixins, and all model classes.
"""
from chatsync.infra.database.models.base import Base, TimestampMixin, _uuid_pk
from chatsync.infra.database.models.chat import (
    BookingRecordProjection,
    Chat,
    ChatMapping,
    Message,
)
from chatsync.infra.database.models.identity import IdentityMapping, User
from chatsync.infra.database.models.notification import (
    PendingNotification,
    SentNotification,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "_uuid_pk",
    "IdentityMapping",
    "User",
    "ChatMapping",
    "BookingRecordProjection",
    "Chat",
    "Message",
    "PendingNotification",
    "SentNotification",
]
