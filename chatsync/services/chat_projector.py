"""Chat status projection.

A chat is a pure function of its mapping's record sub-ledger plus the
resolved participants:

* a record is *active* when it is not deleted, its attendance is not settled
  (1 or -1) and ``scheduled_at >= now - grace_factor * length``;
* status is ``active`` when any record is active, else ``archived``;
* title/date come from the earliest active record, or from the latest record
  overall when none is active.

The projector compares before writing, so running it twice is a no-op.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from chatsync.infra.database.models.chat import BookingRecordProjection, ChatMapping
from chatsync.infra.database.repositories.chat import BookingRecordRepository, ChatRepository
from chatsync.services.participant_resolver import ParticipantResolver
from chatsync.core.timeutils import to_epoch_millis
from chatsync.types import Attendance, ChatStatus, ProjectionOutcome

logger = logging.getLogger(__name__)

DEFAULT_GRACE_FACTOR = 3


def is_record_active(
    record: BookingRecordProjection,
    now: datetime,
    grace_factor: int = DEFAULT_GRACE_FACTOR,
) -> bool:
    if record.deleted or Attendance.is_settled(record.attendance):
        return False
    window_start = now - timedelta(seconds=grace_factor * record.length)
    return record.scheduled_at >= window_start


def determine_chat_status(
    records: Sequence[BookingRecordProjection],
    now: datetime,
    grace_factor: int = DEFAULT_GRACE_FACTOR,
) -> ChatStatus:
    if any(is_record_active(r, now, grace_factor) for r in records):
        return ChatStatus.ACTIVE
    return ChatStatus.ARCHIVED


def select_display_record(
    records: Sequence[BookingRecordProjection],
    now: datetime,
    grace_factor: int = DEFAULT_GRACE_FACTOR,
) -> Optional[BookingRecordProjection]:
    """Earliest active record, else latest record overall. Ties keep the first seen."""
    if not records:
        return None
    active = [r for r in records if is_record_active(r, now, grace_factor)]
    if active:
        return min(active, key=lambda r: r.scheduled_at)
    return max(records, key=lambda r: r.scheduled_at)


def build_chat_state(
    records: Sequence[BookingRecordProjection],
    users: List[str],
    now: datetime,
    grace_factor: int = DEFAULT_GRACE_FACTOR,
) -> Dict[str, Any]:
    display = select_display_record(records, now, grace_factor)
    return {
        "status": determine_chat_status(records, now, grace_factor).value,
        "title": display.service_title if display else None,
        "date": to_epoch_millis(display.scheduled_at) if display else None,
        "users": list(users),
    }


def _differs(chat: Any, state: Dict[str, Any]) -> bool:
    return (
        chat.status != state["status"]
        or chat.title != state["title"]
        or chat.date != state["date"]
        or sorted(chat.users or []) != sorted(state["users"])
    )


class ChatStatusProjector:
    def __init__(
        self,
        records: BookingRecordRepository,
        chats: ChatRepository,
        participants: ParticipantResolver,
        *,
        grace_factor: int = DEFAULT_GRACE_FACTOR,
    ) -> None:
        self._records = records
        self._chats = chats
        self._participants = participants
        self._grace_factor = grace_factor

    async def project(self, mapping: ChatMapping, now: datetime) -> ProjectionOutcome:
        records = await self._records.list_for_mapping(mapping.id)
        if not records:
            logger.debug("Mapping %s has no records, chat not projected", mapping.id)
            return ProjectionOutcome.SKIPPED

        users = await self._participants.resolve_for_mapping(mapping)
        state = build_chat_state(records, users, now, self._grace_factor)

        chat = await self._chats.get_by_chat_mapping_id(mapping.id)
        if chat is None:
            chat = await self._chats.create({
                "id": uuid.uuid4(),
                "chat_mapping_id": mapping.id,
                "created_at": now,
                "updated_at": now,
                **state,
            })
            logger.info(
                "Chat created: %s (mapping=%s status=%s users=%d)",
                chat.id, mapping.id, state["status"], len(users),
            )
            return ProjectionOutcome.CREATED

        if not _differs(chat, state):
            return ProjectionOutcome.UNCHANGED

        await self._chats.apply(chat, {**state, "updated_at": now})
        logger.info("Chat updated: %s (mapping=%s status=%s)", chat.id, mapping.id, state["status"])
        return ProjectionOutcome.UPDATED
