"""
Celery tasks for reminder dispatch.

Celery beat publishes `reminders.dispatch_due_reminders` on every clock minute
with an expiry one interval ahead (see CELERY_BEAT_SCHEDULE in settings).
"""

from datetime import datetime, timedelta

from celery import shared_task
from django.conf import settings

from reminders.services.scheduler import DispatchScheduler

_scheduler = None


def get_scheduler() -> DispatchScheduler:
    """Scheduler shared by every task run in this worker process."""
    global _scheduler
    if _scheduler is None:
        _scheduler = DispatchScheduler()
    return _scheduler


def scheduled_tick_time(expires, interval: int) -> datetime | None:
    """
    Time beat published this run, recovered from the message expiry.

    Beat sets `expires` to publish time plus one interval, so the tick
    evaluates the minute it was scheduled for even after queue delay.
    Returns None for runs without an expiry (called directly or by hand).
    """
    if not expires:
        return None
    if isinstance(expires, str):
        expires = datetime.fromisoformat(expires)
    return expires - timedelta(seconds=interval)


@shared_task(
    bind=True,
    name="reminders.dispatch_due_reminders",
    soft_time_limit=100,
    time_limit=120,
)
def dispatch_due_reminders(self) -> dict:
    """Run one dispatch tick. Returns the tick report as a dict."""
    now = scheduled_tick_time(self.request.expires, settings.REMINDER_TICK_INTERVAL)
    report = get_scheduler().tick(now=now)
    return report.as_dict()
