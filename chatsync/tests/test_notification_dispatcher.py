"""Tests for the pending-notification state machine."""
from __future__ import annotations

import asyncio
import unittest
from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from chatsync.clients.push import NoOpPushSender
from chatsync.services.notification_dispatcher import NotificationDispatcher, build_push_message
from chatsync.tests.fakes import (
    T0,
    FakeMessageRepository,
    FakeNotificationRepository,
    FakeUserRepository,
    make_user,
)
from chatsync.types import DispatchOutcome


def _run(coro):
    return asyncio.run(coro)


def _notification(recipient_id, *, chat_id=None, message_id=None):
    return SimpleNamespace(
        id=uuid4(),
        type="newMessage",
        title="Anna",
        text="See you tomorrow",
        from_user_id=uuid4(),
        to_user_id=recipient_id,
        chat_id=chat_id,
        message_id=message_id,
        status="pending",
        created_at=T0,
        updated_at=T0,
    )


class _Base(unittest.TestCase):
    audit_dropped = False

    def setUp(self):
        self.notifications = FakeNotificationRepository()
        self.users = FakeUserRepository()
        self.messages = FakeMessageRepository()
        self.push = MagicMock()
        self.push.send = AsyncMock(return_value=True)
        self.dispatcher = NotificationDispatcher(
            self.notifications, self.users, self.messages, self.push,
            audit_dropped=self.audit_dropped,
        )
        self.recipient = make_user(push_token="device-token")
        self.users.items.append(self.recipient)

    def _queue(self, **kwargs):
        n = _notification(self.recipient.id, **kwargs)
        self.notifications.items.append(n)
        return n

    def _message(self, *, status="sent", updated_at=T0):
        m = SimpleNamespace(id=uuid4(), chat_id=uuid4(), status=status, updated_at=updated_at)
        self.messages.items.append(m)
        return m


class TestDispatch(_Base):
    def test_debounce_holds_then_sends(self):
        message = self._message(updated_at=T0)
        n = self._queue(chat_id=message.chat_id, message_id=message.id)

        held = _run(self.dispatcher.dispatch(n, T0 + timedelta(seconds=30)))
        self.assertEqual(held, DispatchOutcome.HELD)
        self.assertEqual(self.notifications.items, [n])
        self.push.send.assert_not_awaited()

        sent = _run(self.dispatcher.dispatch(n, T0 + timedelta(seconds=61)))
        self.assertEqual(sent, DispatchOutcome.SENT)
        self.assertEqual(self.notifications.items, [])
        self.assertEqual(self.notifications.sent[0].status, "sent")
        self.assertEqual(self.notifications.sent[0].updated_at, T0 + timedelta(seconds=61))
        self.push.send.assert_awaited_once()

    def test_read_message_removed(self):
        message = self._message(status="read")
        n = self._queue(chat_id=message.chat_id, message_id=message.id)

        outcome = _run(self.dispatcher.dispatch(n, T0 + timedelta(minutes=5)))
        self.assertEqual(outcome, DispatchOutcome.REMOVED)
        self.assertEqual(self.notifications.items, [])
        self.assertEqual(self.notifications.sent, [])
        self.push.send.assert_not_awaited()

    def test_missing_message_removed(self):
        n = self._queue(chat_id=uuid4(), message_id=uuid4())
        self.assertEqual(_run(self.dispatcher.dispatch(n, T0)), DispatchOutcome.REMOVED)
        self.assertEqual(self.notifications.sent, [])

    def test_missing_recipient_removed(self):
        n = _notification(uuid4())
        self.notifications.items.append(n)
        self.assertEqual(_run(self.dispatcher.dispatch(n, T0)), DispatchOutcome.REMOVED)
        self.assertEqual(self.notifications.items, [])

    def test_no_push_token_closes_as_sent(self):
        self.recipient.push_token = None
        n = self._queue()

        outcome = _run(self.dispatcher.dispatch(n, T0))
        self.assertEqual(outcome, DispatchOutcome.SENT_WITHOUT_PUSH)
        self.assertEqual(self.notifications.sent[0].status, "sent")
        self.push.send.assert_not_awaited()

    def test_notifications_disabled_closes_as_sent(self):
        self.recipient.notifications_enabled = False
        n = self._queue()
        self.assertEqual(_run(self.dispatcher.dispatch(n, T0)), DispatchOutcome.SENT_WITHOUT_PUSH)
        self.push.send.assert_not_awaited()

    def test_unset_preference_still_pushes(self):
        self.recipient.notifications_enabled = None
        n = self._queue()
        self.assertEqual(_run(self.dispatcher.dispatch(n, T0)), DispatchOutcome.SENT)

    def test_push_failure_recorded(self):
        self.push.send = AsyncMock(return_value=False)
        n = self._queue()

        outcome = _run(self.dispatcher.dispatch(n, T0))
        self.assertEqual(outcome, DispatchOutcome.FAILED)
        self.assertEqual(self.notifications.sent[0].status, "failed")
        self.assertEqual(self.notifications.items, [])

    def test_without_gateway_item_is_archived_failed(self):
        self.dispatcher._push = NoOpPushSender()
        n = self._queue()

        outcome = _run(self.dispatcher.dispatch(n, T0))
        self.assertEqual(outcome, DispatchOutcome.FAILED)
        self.assertEqual(self.notifications.sent[0].status, "failed")


class TestDispatchAuditDropped(_Base):
    audit_dropped = True

    def test_read_message_leaves_removed_history_row(self):
        message = self._message(status="read")
        n = self._queue(chat_id=message.chat_id, message_id=message.id)

        outcome = _run(self.dispatcher.dispatch(n, T0 + timedelta(minutes=5)))
        self.assertEqual(outcome, DispatchOutcome.REMOVED)
        self.assertEqual(self.notifications.items, [])
        self.assertEqual(len(self.notifications.sent), 1)
        self.assertEqual(self.notifications.sent[0].status, "removed")


class TestBuildPushMessage(unittest.TestCase):
    def test_all_data_values_are_strings(self):
        n = _notification(uuid4(), chat_id=uuid4(), message_id=None)
        message = build_push_message(n)

        self.assertEqual(message.title, "Anna")
        self.assertEqual(message.body, "See you tomorrow")
        self.assertEqual(message.data["chatId"], str(n.chat_id))
        self.assertEqual(message.data["messageId"], "")
        self.assertEqual(message.data["createdAt"], T0.isoformat())
        self.assertTrue(all(isinstance(v, str) for v in message.data.values()))


if __name__ == "__main__":
    unittest.main()
