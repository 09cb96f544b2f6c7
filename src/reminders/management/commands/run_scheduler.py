"""
Django management command that runs the reminder dispatch loop in-process.

Alternative to Celery beat for single-instance deployments.
"""

from django.core.management.base import BaseCommand

from reminders.services.scheduler import DispatchScheduler


class Command(BaseCommand):
    """Command to run the reminder dispatch scheduler."""

    help = "Dispatch weather reminders every tick interval (or once with --once)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--once",
            action="store_true",
            help="Run a single tick for the current minute and exit",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        scheduler = DispatchScheduler()

        if options["once"]:
            report = scheduler.tick()
            if report.skipped:
                self.stdout.write(self.style.WARNING("Tick skipped: another tick is running"))
            elif report.store_failed:
                self.stdout.write(self.style.ERROR("Tick aborted: reminder store unavailable"))
            else:
                self.stdout.write(
                    self.style.SUCCESS(
                        f"✓ {report.current_time}: {report.sent} of {report.matched} "
                        f"matching reminders sent"
                    )
                )
            return

        self.stdout.write(
            self.style.SUCCESS(f"Dispatch scheduler running every {scheduler.interval}s...")
        )
        try:
            scheduler.run_forever()
        except KeyboardInterrupt:
            self.stdout.write("Scheduler stopped")
