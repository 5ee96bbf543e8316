"""Tests for env-driven config dataclasses."""
from __future__ import annotations

import unittest
from unittest.mock import patch

from chatsync.config import (
    FirebaseConfig,
    SyncConfig,
    load_postgres_config,
    load_sync_config,
    load_yclients_config,
)


class TestSyncConfig(unittest.TestCase):
    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            config = load_sync_config()
        self.assertEqual(config.page_size, 100)
        self.assertEqual(config.lookback_days, 7)
        self.assertEqual(config.activity_grace_factor, 3)
        self.assertEqual(config.quiescence_seconds, 60)
        self.assertFalse(config.audit_dropped_notifications)
        self.assertEqual(
            (config.record_sync_interval, config.chat_sync_interval, config.notification_interval),
            (60, 300, 60),
        )

    def test_env_and_overrides(self):
        env = {"NOTIFICATION_AUDIT_DROPPED": "true", "SYNC_LOOKBACK_DAYS": "0"}
        with patch.dict("os.environ", env, clear=True):
            config = load_sync_config(page_size=50)
        self.assertTrue(config.audit_dropped_notifications)
        self.assertEqual(config.lookback_days, 0)
        self.assertEqual(config.page_size, 50)

    def test_invalid_values_rejected(self):
        with self.assertRaises(ValueError):
            SyncConfig(page_size=0)
        with self.assertRaises(ValueError):
            SyncConfig(lookback_days=-1)


class TestYClientsConfig(unittest.TestCase):
    def test_required_fields(self):
        with patch.dict("os.environ", {}, clear=True):
            with self.assertRaises(ValueError):
                load_yclients_config()
            with self.assertRaises(ValueError):
                load_yclients_config(partner_token="p")

    def test_from_env(self):
        env = {
            "YCLIENTS_PARTNER_TOKEN": "p",
            "YCLIENTS_COMPANY_ID": "4242",
            "YCLIENTS_BASE_URL": "https://api.example.test/",
        }
        with patch.dict("os.environ", env, clear=True):
            config = load_yclients_config()
        self.assertEqual(config.company_id, 4242)
        self.assertEqual(config.base_url, "https://api.example.test")
        self.assertIsNone(config.default_user_token)
        self.assertEqual(config.timeout, 30)


class TestPostgresAndFirebaseConfig(unittest.TestCase):
    def test_postgres_url_validated(self):
        with patch.dict("os.environ", {"DATABASE_URL": "mysql://x"}, clear=True):
            with self.assertRaises(ValueError):
                load_postgres_config()

    def test_firebase_enabled_only_with_credentials_or_project(self):
        self.assertFalse(FirebaseConfig().enabled)
        self.assertTrue(FirebaseConfig(credentials_path="/tmp/sa.json").enabled)
        self.assertEqual(FirebaseConfig().android_channel_id, "chat_messages")


if __name__ == "__main__":
    unittest.main()
