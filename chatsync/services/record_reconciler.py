"""RecordReconciler: keep a chat mapping's record sub-ledger in step with the provider.

Writes happen only when a compared field actually changed, so re-running
against unchanged upstream data is a no-op.
"""
from __future__ import annotations

import logging
from uuid import UUID

from chatsync.clients.booking import BookingRecord
from chatsync.core.timeutils import parse_provider_datetime
from chatsync.infra.database.repositories.chat import BookingRecordRepository
from chatsync.types import ReconcileOutcome, RecordSnapshot

logger = logging.getLogger(__name__)


def normalize_record(record: BookingRecord) -> RecordSnapshot:
    """Project a provider record into the stored shape (first service wins)."""
    service = record.services[0] if record.services else None
    return RecordSnapshot(
        record_id=record.id,
        deleted=bool(record.deleted),
        service_title=service.title if service else None,
        service_id=service.id if service else None,
        scheduled_at=parse_provider_datetime(record.datetime),
        attendance=int(record.attendance),
        length=int(record.length),
        payment_status=int(record.payment_status),
        bookform_id=record.bookform_id,
    )


class RecordReconciler:
    def __init__(self, records: BookingRecordRepository) -> None:
        self._records = records

    async def reconcile(self, chat_mapping_id: UUID, record: BookingRecord) -> ReconcileOutcome:
        snapshot = normalize_record(record)
        stored = await self._records.get_for_mapping(chat_mapping_id, snapshot.record_id)

        if stored is None:
            await self._records.create_from_snapshot(chat_mapping_id, snapshot)
            logger.debug("Record %s added to mapping %s", snapshot.record_id, chat_mapping_id)
            return ReconcileOutcome.CREATED

        changes = snapshot.diff(stored)
        if not changes:
            return ReconcileOutcome.UNCHANGED

        await self._records.apply(stored, changes)
        logger.debug(
            "Record %s updated in mapping %s: %s",
            snapshot.record_id, chat_mapping_id, sorted(changes),
        )
        return ReconcileOutcome.UPDATED
