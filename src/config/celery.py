"""
Celery app for the Umbrella Reminder project.

The beat schedule lives in Django settings (CELERY_BEAT_SCHEDULE).
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("umbrella_reminder")

# Broker, result backend and beat schedule come from CELERY_* settings
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=3600,
    # A tick holds the worker for its whole run
    worker_prefetch_multiplier=1,
)
