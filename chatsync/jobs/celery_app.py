"""
Celery app for chatsync. Run the scheduler and a worker with:

    celery -A chatsync.jobs.celery_app beat
    celery -A chatsync.jobs.celery_app worker
"""
from celery import Celery
from celery.signals import setup_logging

from chatsync.config import load_sync_config
from chatsync.core.logger import configure

_config = load_sync_config()

app = Celery(
    "chatsync",
    broker=_config.broker_url,
    backend=_config.result_backend or _config.broker_url,
    include=["chatsync.jobs.tasks"],
)
app.conf.update(
    timezone="UTC",
    enable_utc=True,
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    worker_prefetch_multiplier=1,
)

# Runs not picked up within their interval expire; the next beat replaces them.
app.conf.beat_schedule = {
    "record-sync": {
        "task": "chatsync.jobs.tasks.record_sync_task",
        "schedule": _config.record_sync_interval,
        "options": {"expires": _config.record_sync_interval},
    },
    "chat-sync": {
        "task": "chatsync.jobs.tasks.chat_sync_task",
        "schedule": _config.chat_sync_interval,
        "options": {"expires": _config.chat_sync_interval},
    },
    "notification-dispatch": {
        "task": "chatsync.jobs.tasks.notification_dispatch_task",
        "schedule": _config.notification_interval,
        "options": {"expires": _config.notification_interval},
    },
}


@setup_logging.connect
def _configure_logging(**kwargs):
    configure()
