"""
Services layer for the Umbrella Reminder dispatch engine.

This package contains the dispatch pipeline:
- ReminderStore: read-only access to stored reminders
- WeatherService: current weather lookup
- NotificationComposer: email rendering
- EmailService: email delivery
- DispatchGuard: tick lock and duplicate-dispatch markers
- DispatchScheduler: the periodic tick that ties them together
"""
