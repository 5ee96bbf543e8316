"""Scheduled jobs: record sync, chat projection sync and notification dispatch (Celery beat)."""
