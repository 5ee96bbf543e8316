"""Tests for the scheduled job entry points."""
from __future__ import annotations

import asyncio
import unittest
from unittest.mock import patch

from chatsync.config.yclients import YClientsConfig
from chatsync.core.exceptions import ConfigurationError
from chatsync.jobs.runner import run_record_sync
from chatsync.tests.fakes import T0


class TestRunRecordSync(unittest.TestCase):
    def test_requires_default_user_token(self):
        config = YClientsConfig(partner_token="partner", company_id=4242)

        with patch("chatsync.jobs.runner.load_yclients_config", return_value=config), \
                patch("chatsync.jobs.runner.job_session") as job_session:
            with self.assertRaises(ConfigurationError) as ctx:
                asyncio.run(run_record_sync(T0))

        job_session.assert_not_called()
        self.assertEqual(ctx.exception.http_status, 500)
        self.assertIn("YCLIENTS_DEFAULT_USER_TOKEN", ctx.exception.message)


if __name__ == "__main__":
    unittest.main()
