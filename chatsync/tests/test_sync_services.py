"""Tests for the scheduled job services: per-item isolation and stats."""
from __future__ import annotations

import asyncio
import unittest
from datetime import date, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import httpx

from chatsync.clients.booking import YClientsClient
from chatsync.config.sync import SyncConfig
from chatsync.config.yclients import YClientsConfig
from chatsync.core.exceptions import BookingProviderError
from chatsync.services.chat_mapping_resolver import ChatMappingResolver
from chatsync.services.chat_sync_service import ChatSyncService
from chatsync.services.notification_service import NotificationService
from chatsync.services.record_reconciler import RecordReconciler
from chatsync.services.record_sync_service import RecordSyncService
from chatsync.tests.fakes import (
    T0,
    FakeBookingRecordRepository,
    FakeChatMappingRepository,
    FakeNotificationRepository,
    FakeSession,
    make_mapping,
    provider_record,
    record_page,
    record_payload,
    staff_list,
)
from chatsync.types import DispatchOutcome, ProjectionOutcome


def _run(coro):
    return asyncio.run(coro)


def _booking_client(staff, records_by_staff):
    client = MagicMock()
    client.fetch_staff_list = AsyncMock(return_value=staff_list(*staff))

    async def fetch_records(record_filter):
        result = records_by_staff[record_filter.staff_id]
        if isinstance(result, Exception):
            raise result
        return record_page(result, len(result))

    client.fetch_records = AsyncMock(side_effect=fetch_records)
    return client


class TestRecordSyncService(unittest.TestCase):
    def _service(self, client, config=None):
        session = FakeSession()
        svc = RecordSyncService(session, client, config or SyncConfig())
        svc._resolver = ChatMappingResolver(FakeChatMappingRepository())
        svc._reconciler = RecordReconciler(FakeBookingRecordRepository())
        return svc, session

    def test_full_run_stats(self):
        client = _booking_client(
            [{"id": 7, "name": "Olga", "user": {"phone": "79110000000"}}],
            {7: [provider_record(1), provider_record(2), provider_record(3, client_id=None)]},
        )
        svc, session = self._service(client)

        stats = _run(svc.run(T0))

        self.assertEqual(stats.staff_processed, 1)
        self.assertEqual(stats.records_processed, 3)
        self.assertEqual(stats.records_created, 2)
        self.assertEqual(stats.records_without_client, 1)
        self.assertEqual(stats.mappings_created, 1)
        self.assertEqual(stats.errors, 0)
        self.assertEqual(session.savepoints, 3)

    def test_second_run_is_unchanged(self):
        client = _booking_client([{"id": 7}], {7: [provider_record(1), provider_record(2)]})
        svc, _ = self._service(client)
        _run(svc.run(T0))

        stats = _run(svc.run(T0))
        self.assertEqual(stats.records_unchanged, 2)
        self.assertEqual(stats.records_created, 0)
        self.assertEqual(stats.mappings_created, 0)

    def test_failing_record_is_isolated(self):
        client = _booking_client([{"id": 7}], {7: [provider_record(i) for i in range(1, 6)]})
        svc, session = self._service(client)
        real = svc._reconciler.reconcile

        async def flaky(mapping_id, record):
            if record.id in (2, 4):
                raise RuntimeError("write failed")
            return await real(mapping_id, record)

        svc._reconciler.reconcile = flaky
        stats = _run(svc.run(T0))

        self.assertEqual(stats.records_processed, 5)
        self.assertEqual(stats.records_created, 3)
        self.assertEqual(stats.errors, 2)
        self.assertEqual(session.rolled_back, 2)

    def test_failing_staff_fetch_is_isolated(self):
        client = _booking_client(
            [{"id": 7}, {"id": 8}],
            {7: BookingProviderError("boom", status=500), 8: [provider_record(1)]},
        )
        svc, _ = self._service(client)

        stats = _run(svc.run(T0))
        self.assertEqual(stats.errors, 1)
        self.assertEqual(stats.staff_processed, 1)
        self.assertEqual(stats.records_created, 1)

    def test_inactive_staff_skipped_and_lookback_applied(self):
        client = _booking_client(
            [{"id": 7}, {"id": 8, "is_fired": True}, {"id": 9, "is_deleted": True}],
            {7: []},
        )
        svc, _ = self._service(client, SyncConfig(lookback_days=7))

        stats = _run(svc.run(T0))

        self.assertEqual(stats.staff_processed, 1)
        sent = client.fetch_records.await_args.args[0]
        self.assertEqual(sent.staff_id, 7)
        self.assertEqual(sent.start_date, date(2026, 3, 3))

    def test_lookback_disabled(self):
        client = _booking_client([{"id": 7}], {7: []})
        svc, _ = self._service(client, SyncConfig(lookback_days=0))
        _run(svc.run(T0))
        self.assertIsNone(client.fetch_records.await_args.args[0].start_date)

    def test_malformed_record_on_page_is_isolated(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/v1/company/4242/staff":
                return httpx.Response(200, json={"success": True, "data": [{"id": 7, "name": "Olga"}], "meta": []})
            page = [record_payload(1), record_payload(2, datetime=None), record_payload(3, client_id=200)]
            return httpx.Response(200, json={"success": True, "data": page, "meta": {"total_count": 3}})

        ledger = FakeBookingRecordRepository()

        async def go():
            client = YClientsClient(
                YClientsConfig(partner_token="partner", company_id=4242, base_url="https://yclients.test"),
                transport=httpx.MockTransport(handler),
            )
            try:
                svc, session = self._service(client)
                svc._reconciler = RecordReconciler(ledger)
                return await svc.run(T0), session
            finally:
                await client.aclose()

        stats, session = _run(go())

        self.assertEqual(stats.staff_processed, 1)
        self.assertEqual(stats.records_processed, 3)
        self.assertEqual(stats.records_created, 2)
        self.assertEqual(stats.errors, 1)
        self.assertEqual(session.rolled_back, 1)
        self.assertEqual(sorted(r.record_id for r in ledger.items), [1, 3])


class TestChatSyncService(unittest.TestCase):
    def test_outcomes_and_errors_counted(self):
        mappings = [make_mapping(client_id=i) for i in range(4)]
        outcomes = {
            mappings[0].id: ProjectionOutcome.CREATED,
            mappings[1].id: ProjectionOutcome.UNCHANGED,
            mappings[2].id: ProjectionOutcome.SKIPPED,
            mappings[3].id: RuntimeError("db down"),
        }

        async def project(mapping, now):
            result = outcomes[mapping.id]
            if isinstance(result, Exception):
                raise result
            return result

        svc = ChatSyncService(FakeSession())
        svc._mappings = FakeChatMappingRepository(mappings)
        svc._projector = MagicMock()
        svc._projector.project = AsyncMock(side_effect=project)

        stats = _run(svc.run(T0))

        self.assertEqual(stats.chats_processed, 2)
        self.assertEqual(stats.chats_created, 1)
        self.assertEqual(stats.chats_unchanged, 1)
        self.assertEqual(stats.chats_skipped, 1)
        self.assertEqual(stats.errors, 1)


class TestNotificationService(unittest.TestCase):
    def test_sweep_counts(self):
        pending = [SimpleNamespace(id=uuid4()) for _ in range(4)]
        results = [DispatchOutcome.SENT, DispatchOutcome.HELD, RuntimeError("x"), DispatchOutcome.REMOVED]

        svc = NotificationService(FakeSession(), MagicMock())
        svc._notifications = FakeNotificationRepository(pending)
        svc._dispatcher = MagicMock()
        svc._dispatcher.dispatch = AsyncMock(side_effect=results)

        stats = _run(svc.run(T0 + timedelta(minutes=1)))

        self.assertEqual(stats.processed, 3)
        self.assertEqual(stats.sent, 1)
        self.assertEqual(stats.held, 1)
        self.assertEqual(stats.removed, 1)
        self.assertEqual(stats.errors, 1)

    def test_empty_queue(self):
        svc = NotificationService(FakeSession(), MagicMock())
        svc._notifications = FakeNotificationRepository()
        stats = _run(svc.run(T0))
        self.assertEqual(stats.processed, 0)


if __name__ == "__main__":
    unittest.main()
