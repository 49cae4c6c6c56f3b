"""Celery application configuration."""

from celery import Celery

from receipt_tracker.config import get_settings

settings = get_settings()

app = Celery(
    "receipt_tracker",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["receipt_tracker.tasks.receipt_scan"],
)

app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=180,  # vision calls take up to a minute
    task_soft_time_limit=150,
)
