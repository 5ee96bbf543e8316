"""RecordSyncService: the per-minute provider → sub-ledger pass."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chatsync.clients.booking import (
    BaseBookingClient,
    BookingRecord,
    RawRecord,
    Staff,
    raw_record_id,
)
from chatsync.config.sync import SyncConfig
from chatsync.core.timeutils import days_ago
from chatsync.infra.database.repositories.chat import (
    BookingRecordRepository,
    ChatMappingRepository,
)
from chatsync.services.booking_fetcher import BookingRecordFetcher
from chatsync.services.chat_mapping_resolver import ChatMappingResolver
from chatsync.services.record_reconciler import RecordReconciler
from chatsync.types import ReconcileOutcome, RecordSyncStats

logger = logging.getLogger(__name__)


class RecordSyncService:
    """Pull every active staff member's records and reconcile them one by one.

    A staff member whose fetch fails counts one error and is skipped. Each
    record is validated and written in its own SAVEPOINT, so a malformed or
    failing record counts one error and only rolls back itself.
    """

    def __init__(
        self,
        session: AsyncSession,
        client: BaseBookingClient,
        config: Optional[SyncConfig] = None,
    ) -> None:
        self._session = session
        self._client = client
        self._config = config or SyncConfig()
        self._fetcher = BookingRecordFetcher(client, page_size=self._config.page_size)
        self._resolver = ChatMappingResolver(ChatMappingRepository(session))
        self._reconciler = RecordReconciler(BookingRecordRepository(session))

    async def run(self, now: datetime) -> RecordSyncStats:
        stats = RecordSyncStats()
        staff_list = await self._client.fetch_staff_list()
        active = [s for s in (staff_list.data or []) if s.is_active]
        logger.info("Record sync: %d active staff of %d", len(active), len(staff_list.data or []))

        start_date = None
        if self._config.lookback_days > 0:
            start_date = days_ago(self._config.lookback_days, now)

        for staff in active:
            try:
                records = await self._fetcher.fetch_staff_records(staff.id, start_date=start_date)
            except Exception:
                logger.exception("Record sync: fetch failed for staff %s", staff.id)
                stats.errors += 1
                continue
            stats.staff_processed += 1
            for raw in records:
                await self._sync_record(staff, raw, stats)

        logger.info("Record sync finished: %s", stats.to_dict())
        return stats

    async def _sync_record(self, staff: Staff, raw: RawRecord, stats: RecordSyncStats) -> None:
        stats.records_processed += 1
        try:
            async with self._session.begin_nested():
                record = BookingRecord.model_validate(raw)
                resolved = await self._resolver.resolve_for_record(record, staff_phone=staff.phone)
                if resolved is None:
                    outcome = None
                else:
                    outcome = await self._reconciler.reconcile(resolved.mapping.id, record)
        except Exception:
            logger.exception("Record sync: record %s (staff %s) failed", raw_record_id(raw), staff.id)
            stats.errors += 1
            return

        if resolved is None:
            stats.records_without_client += 1
            return
        if resolved.created:
            stats.mappings_created += 1
        if outcome is ReconcileOutcome.CREATED:
            stats.records_created += 1
        elif outcome is ReconcileOutcome.UPDATED:
            stats.records_updated += 1
        else:
            stats.records_unchanged += 1
