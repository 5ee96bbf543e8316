"""Tests for record normalization and field-level reconciliation."""
from __future__ import annotations

import asyncio
import unittest
from datetime import timedelta
from uuid import uuid4

from chatsync.services.record_reconciler import RecordReconciler, normalize_record
from chatsync.tests.fakes import T0, FakeBookingRecordRepository, provider_record
from chatsync.types import ReconcileOutcome


def _run(coro):
    return asyncio.run(coro)


class TestNormalizeRecord(unittest.TestCase):
    def test_first_service_and_aware_datetime(self):
        record = provider_record(
            services=[{"id": 10, "title": "Haircut"}, {"id": 11, "title": "Beard"}],
        )
        snapshot = normalize_record(record)
        self.assertEqual(snapshot.service_title, "Haircut")
        self.assertEqual(snapshot.service_id, 10)
        self.assertEqual(snapshot.scheduled_at, T0)
        self.assertIsNotNone(snapshot.scheduled_at.tzinfo)

    def test_no_services(self):
        snapshot = normalize_record(provider_record(services=[]))
        self.assertIsNone(snapshot.service_title)
        self.assertIsNone(snapshot.service_id)

    def test_numeric_strings_coerced(self):
        snapshot = normalize_record(provider_record(attendance="-1", length="1800"))
        self.assertEqual(snapshot.attendance, -1)
        self.assertEqual(snapshot.length, 1800)


class TestRecordReconciler(unittest.TestCase):
    def setUp(self):
        self.repo = FakeBookingRecordRepository()
        self.reconciler = RecordReconciler(self.repo)
        self.mapping_id = uuid4()

    def test_insert_then_idempotent(self):
        record = provider_record(5)
        first = _run(self.reconciler.reconcile(self.mapping_id, record))
        writes_after_first = self.repo.writes
        second = _run(self.reconciler.reconcile(self.mapping_id, record))

        self.assertEqual(first, ReconcileOutcome.CREATED)
        self.assertEqual(second, ReconcileOutcome.UNCHANGED)
        self.assertEqual(self.repo.writes, writes_after_first)
        self.assertEqual(len(self.repo.items), 1)

    def test_single_field_change_updates_only_that_field(self):
        _run(self.reconciler.reconcile(self.mapping_id, provider_record(5)))
        stored = self.repo.items[0]

        outcome = _run(self.reconciler.reconcile(self.mapping_id, provider_record(5, attendance=1)))

        self.assertEqual(outcome, ReconcileOutcome.UPDATED)
        self.assertEqual(stored.attendance, 1)
        self.assertEqual(stored.service_title, "Haircut")
        self.assertEqual(len(self.repo.items), 1)

    def test_same_instant_in_other_offset_is_unchanged(self):
        _run(self.reconciler.reconcile(self.mapping_id, provider_record(5)))
        outcome = _run(self.reconciler.reconcile(
            self.mapping_id, provider_record(5, datetime="2026-03-10T12:00:00Z"),
        ))
        self.assertEqual(outcome, ReconcileOutcome.UNCHANGED)

    def test_deleted_flag_flips_instead_of_removing(self):
        _run(self.reconciler.reconcile(self.mapping_id, provider_record(5)))
        outcome = _run(self.reconciler.reconcile(self.mapping_id, provider_record(5, deleted=True)))
        self.assertEqual(outcome, ReconcileOutcome.UPDATED)
        self.assertTrue(self.repo.items[0].deleted)

    def test_rescheduled_record_updates_timestamp(self):
        _run(self.reconciler.reconcile(self.mapping_id, provider_record(5)))
        _run(self.reconciler.reconcile(
            self.mapping_id, provider_record(5, datetime="2026-03-10T16:00:00+03:00"),
        ))
        self.assertEqual(self.repo.items[0].scheduled_at, T0 + timedelta(hours=1))


if __name__ == "__main__":
    unittest.main()
