"""Celery tasks wrapping the async job runners."""
import asyncio
import logging

from celery import shared_task

from chatsync.jobs.runner import run_chat_sync, run_notification_dispatch, run_record_sync

logger = logging.getLogger(__name__)


@shared_task(name="chatsync.jobs.tasks.record_sync_task")
def record_sync_task():
    """Pull provider records for every active staff member into the sub-ledgers."""
    stats = asyncio.run(run_record_sync())
    logger.info("record_sync_task done: %s", stats)
    return stats


@shared_task(name="chatsync.jobs.tasks.chat_sync_task")
def chat_sync_task():
    """Re-project every chat mapping into its chat."""
    stats = asyncio.run(run_chat_sync())
    logger.info("chat_sync_task done: %s", stats)
    return stats


@shared_task(name="chatsync.jobs.tasks.notification_dispatch_task")
def notification_dispatch_task():
    """Sweep the pending notification queue once."""
    stats = asyncio.run(run_notification_dispatch())
    logger.info("notification_dispatch_task done: %s", stats)
    return stats
