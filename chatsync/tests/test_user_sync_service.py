"""Tests for the on-demand single-user sync."""
from __future__ import annotations

import asyncio
import unittest
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from chatsync.core.exceptions import BookingProviderError, NotFoundError, UpstreamFetchError
from chatsync.services.chat_mapping_resolver import ChatMappingResolver
from chatsync.services.chat_projector import ChatStatusProjector
from chatsync.services.record_reconciler import RecordReconciler
from chatsync.services.user_sync_service import UserSyncService
from chatsync.tests.fakes import (
    T0,
    FakeBookingRecordRepository,
    FakeChatMappingRepository,
    FakeChatRepository,
    FakeIdentityMappingRepository,
    FakeSession,
    FakeUserRepository,
    make_identity,
    make_user,
    provider_record,
    record_page,
    record_payload,
)


def _run(coro):
    return asyncio.run(coro)


class TestUserSyncService(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.client.fetch_records = AsyncMock(return_value=record_page([], 0))
        self.svc = UserSyncService(FakeSession(), self.client)

        self.identities = FakeIdentityMappingRepository()
        self.users = FakeUserRepository()
        self.records = FakeBookingRecordRepository()
        self.chats = FakeChatRepository()
        participants = MagicMock()
        participants.resolve_for_mapping = AsyncMock(return_value=["u1"])

        self.svc._identities = self.identities
        self.svc._users = self.users
        self.svc._resolver = ChatMappingResolver(FakeChatMappingRepository())
        self.svc._reconciler = RecordReconciler(self.records)
        self.svc._projector = ChatStatusProjector(self.records, self.chats, participants)

    def _user(self, **identity_fields):
        identity = make_identity(**identity_fields)
        user = make_user(identity)
        self.identities.items.append(identity)
        self.users.items.append(user)
        return user

    def test_unknown_user(self):
        with self.assertRaises(NotFoundError) as ctx:
            _run(self.svc.sync_user(str(uuid4()), T0))
        self.assertEqual(ctx.exception.message, "User not found")

    def test_non_uuid_user_id_is_unknown(self):
        with self.assertRaises(NotFoundError):
            _run(self.svc.sync_user("firebase-user-id", T0))

    def test_user_without_identity(self):
        user = make_user()
        self.users.items.append(user)
        with self.assertRaises(NotFoundError) as ctx:
            _run(self.svc.sync_user(str(user.id), T0))
        self.assertEqual(ctx.exception.message, "Identity mapping not found")

    def test_fetch_failure_is_upstream_error(self):
        user = self._user(client_id=100)
        self.client.fetch_records = AsyncMock(side_effect=BookingProviderError("down", status=503))
        with self.assertRaises(UpstreamFetchError) as ctx:
            _run(self.svc.sync_user(str(user.id), T0))
        self.assertEqual(ctx.exception.http_status, 500)

    def test_client_user_fetches_by_client_id_with_own_token(self):
        user = self._user(client_id=100, user_token="own-token")
        _run(self.svc.sync_user(str(user.id), T0))
        sent = self.client.fetch_records.await_args.args[0]
        self.assertEqual(sent.client_id, 100)
        self.assertIsNone(sent.staff_id)
        self.assertEqual(sent.user_token, "own-token")

    def test_staff_id_preferred(self):
        user = self._user(client_id=100, staff_id=7)
        _run(self.svc.sync_user(str(user.id), T0))
        self.assertEqual(self.client.fetch_records.await_args.args[0].staff_id, 7)

    def test_creates_then_updates_chat(self):
        user = self._user(client_id=100)
        future = "2026-03-11T15:00:00+03:00"
        self.client.fetch_records = AsyncMock(return_value=record_page(
            [provider_record(1, datetime=future), provider_record(2, datetime=future)], 2,
        ))

        first = _run(self.svc.sync_user(str(user.id), T0))
        self.assertEqual(first.to_response(), {"recordsProcessed": 2, "chatsCreated": 1, "chatsUpdated": 0})

        self.client.fetch_records = AsyncMock(return_value=record_page(
            [provider_record(1, datetime=future, deleted=True), provider_record(2, datetime=future, deleted=True)], 2,
        ))
        second = _run(self.svc.sync_user(str(user.id), T0 + timedelta(minutes=1)))
        self.assertEqual(second.to_response(), {"recordsProcessed": 2, "chatsCreated": 0, "chatsUpdated": 1})
        self.assertEqual(self.chats.items[0].status, "archived")

    def test_malformed_record_counts_one_error(self):
        user = self._user(client_id=100)
        future = "2026-03-11T15:00:00+03:00"
        self.client.fetch_records = AsyncMock(return_value=record_page(
            [record_payload(1, datetime=future), record_payload(2, datetime=None)], 2,
        ))

        stats = _run(self.svc.sync_user(str(user.id), T0))

        self.assertEqual(stats.records_processed, 1)
        self.assertEqual(stats.errors, 1)
        self.assertEqual(stats.chats_created, 1)
        self.assertEqual([r.record_id for r in self.records.items], [1])


if __name__ == "__main__":
    unittest.main()
