"""Core data structures shared by the reconciliation services."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Dict, Optional, Tuple


class ChatStatus(str, Enum):
    NEW = "new"
    ACTIVE = "active"
    ARCHIVED = "archived"
    PAUSED = "paused"


class MessageStatus(str, Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"


class NotificationType(str, Enum):
    NEW_MESSAGE = "newMessage"
    CHAT_UPDATE = "chatUpdate"
    SYSTEM = "system"


class NotificationStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    REMOVED = "removed"
    """Only written to sent-history when dropped notifications are audited."""


class Attendance(IntEnum):
    """Provider attendance codes. 1 and -1 are settled; anything else is open."""
    NO_SHOW = -1
    PENDING = 0
    ATTENDED = 1

    @classmethod
    def is_settled(cls, code: int) -> bool:
        return code in (cls.ATTENDED, cls.NO_SHOW)


class ReconcileOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class ProjectionOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    """Empty sub-ledger: nothing to project."""


class DispatchOutcome(str, Enum):
    REMOVED = "removed"
    HELD = "held"
    SENT = "sent"
    SENT_WITHOUT_PUSH = "sent_without_push"
    FAILED = "failed"


@dataclass(frozen=True)
class RecordSnapshot:
    """Comparison-ready view of one provider booking record.

    Field names match the ``booking_records`` columns so a snapshot can be
    diffed against (or written into) the stored projection directly.
    """

    record_id: int
    deleted: bool
    service_title: Optional[str]
    service_id: Optional[int]
    scheduled_at: datetime
    attendance: int
    length: int
    payment_status: int
    bookform_id: Optional[int] = None

    @classmethod
    def compared_fields(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "record_id")

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def diff(self, stored: Any) -> Dict[str, Any]:
        """Return ``{field: new_value}`` for every compared field that differs from *stored*.

        Datetimes compare by instant (aware ``==``), never by identity.
        """
        changes: Dict[str, Any] = {}
        for name in self.compared_fields():
            new_value = getattr(self, name)
            if getattr(stored, name) != new_value:
                changes[name] = new_value
        return changes


@dataclass
class RecordSyncStats:
    staff_processed: int = 0
    records_processed: int = 0
    records_created: int = 0
    records_updated: int = 0
    records_unchanged: int = 0
    records_without_client: int = 0
    mappings_created: int = 0
    errors: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class ChatSyncStats:
    chats_processed: int = 0
    chats_created: int = 0
    chats_updated: int = 0
    chats_unchanged: int = 0
    chats_skipped: int = 0
    errors: int = 0

    def record(self, outcome: ProjectionOutcome) -> None:
        if outcome is ProjectionOutcome.SKIPPED:
            self.chats_skipped += 1
            return
        self.chats_processed += 1
        if outcome is ProjectionOutcome.CREATED:
            self.chats_created += 1
        elif outcome is ProjectionOutcome.UPDATED:
            self.chats_updated += 1
        else:
            self.chats_unchanged += 1

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class NotificationStats:
    processed: int = 0
    sent: int = 0
    sent_without_push: int = 0
    failed: int = 0
    removed: int = 0
    held: int = 0
    errors: int = 0

    def record(self, outcome: DispatchOutcome) -> None:
        self.processed += 1
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class UserSyncStats:
    """Stats of one on-demand sync, rendered camelCase for the HTTP response."""

    records_processed: int = 0
    chats_created: int = 0
    chats_updated: int = 0
    errors: int = 0

    def to_response(self) -> Dict[str, int]:
        return {
            "recordsProcessed": self.records_processed,
            "chatsCreated": self.chats_created,
            "chatsUpdated": self.chats_updated,
        }
