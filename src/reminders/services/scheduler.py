"""
DispatchScheduler: the periodic reminder dispatch loop.

Each tick:
1. Takes the current time in the configured fixed UTC offset ("HH:MM")
2. Reads every reminder from the store
3. For each reminder whose time equals the current minute: claims it,
   looks up the weather, composes the email and sends it

Reminders are processed one at a time. A failure for one reminder never stops
the rest of the tick, and a store failure ends the tick without side effects.
There is no catch-up: a minute that no tick samples is simply missed.
"""

import logging
import time
from datetime import datetime, timedelta, timezone

from django.conf import settings

from reminders.exceptions import StoreUnavailable
from reminders.models import Failure, Reminder, TickReport
from reminders.services.composer import NotificationComposer
from reminders.services.dispatch_guard import DispatchGuard
from reminders.services.email_service import EmailService
from reminders.services.store import ReminderStore
from reminders.services.weather_service import WeatherService

logger = logging.getLogger(__name__)


def fixed_timezone(offset_minutes: int) -> timezone:
    return timezone(timedelta(minutes=offset_minutes))


class DispatchScheduler:
    """Matches stored reminders against the clock and dispatches weather emails."""

    def __init__(
        self,
        store: ReminderStore | None = None,
        weather_service: WeatherService | None = None,
        composer: NotificationComposer | None = None,
        email_service: EmailService | None = None,
        guard: DispatchGuard | None = None,
        utc_offset_minutes: int | None = None,
        interval: int | None = None,
    ):
        self.store = store or ReminderStore()
        self.weather_service = weather_service or WeatherService()
        self.composer = composer or NotificationComposer()
        self.email_service = email_service or EmailService()
        self.guard = guard or DispatchGuard()

        if utc_offset_minutes is None:
            utc_offset_minutes = settings.REMINDER_UTC_OFFSET_MINUTES
        self.tz = fixed_timezone(utc_offset_minutes)
        self.interval = interval or settings.REMINDER_TICK_INTERVAL

    def local_now(self, now: datetime | None = None) -> datetime:
        """Current time (or `now`) in the scheduler's fixed offset."""
        if now is None:
            return datetime.now(self.tz)
        return now.astimezone(self.tz)

    def tick(self, now: datetime | None = None) -> TickReport:
        """
        Run one dispatch pass.

        Args:
            now: Aware datetime to evaluate instead of the wall clock

        Returns:
            TickReport with the counters for this pass
        """
        local = self.local_now(now)
        current_time = local.strftime("%H:%M")
        minute = local.strftime("%Y-%m-%dT%H:%M")
        report = TickReport(current_time=current_time)

        with self.guard.hold_tick() as acquired:
            if not acquired:
                logger.warning(f"Tick at {current_time} skipped: previous tick still running")
                report.skipped = True
                return report

            try:
                reminders = self.store.read_all()
            except StoreUnavailable as e:
                logger.error(f"Tick at {current_time} aborted: {e}")
                report.store_failed = True
                return report

            report.reminders = len(reminders)
            for reminder in reminders.values():
                if reminder.time != current_time:
                    continue
                report.matched += 1
                self._dispatch(reminder, minute, report)

        if report.matched:
            logger.info(
                f"Tick at {current_time}: {report.sent}/{report.matched} sent, "
                f"{report.duplicates} duplicates, {report.weather_failures} weather "
                f"failures, {report.delivery_failures} delivery failures"
            )
        return report

    def _dispatch(self, reminder: Reminder, minute: str, report: TickReport) -> None:
        if not self.guard.claim(reminder.id, minute):
            logger.info(f"Reminder {reminder.id} already dispatched for {minute}")
            report.duplicates += 1
            return

        weather = self.weather_service.fetch_weather(reminder.lookup_city)
        if isinstance(weather, Failure):
            report.weather_failures += 1
            report.failed_reminders.append(reminder.id)
            self.guard.release(reminder.id, minute)
            return

        message = self.composer.compose(reminder.email, weather, reminder.city)
        failure = self.email_service.send(message)
        if failure is not None:
            report.delivery_failures += 1
            report.failed_reminders.append(reminder.id)
            self.guard.release(reminder.id, minute)
            return

        report.sent += 1

    def seconds_until_next_tick(self, now: float | None = None) -> float:
        """Seconds to the next interval boundary, so ticks land on whole minutes."""
        now = time.time() if now is None else now
        return self.interval - (now % self.interval)

    def run_forever(self, max_ticks: int | None = None) -> None:
        """
        Tick on every interval boundary until interrupted.

        A tick that overruns its interval makes the loop wait for the next
        boundary; missed boundaries are not replayed.
        """
        logger.info(
            f"Dispatch scheduler started: every {self.interval}s, "
            f"UTC offset {self.tz.utcoffset(None)}"
        )
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            boundary = time.time() + self.seconds_until_next_tick()
            time.sleep(max(0.0, boundary - time.time()))
            # sleep() may wake a hair early; never evaluate before the boundary
            self.tick(datetime.fromtimestamp(max(time.time(), boundary), self.tz))
            ticks += 1
