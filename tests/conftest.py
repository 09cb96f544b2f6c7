"""
Pytest configuration and shared fixtures for Umbrella Reminder tests.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from reminders.services.dispatch_guard import DispatchGuard
from reminders.services.email_service import EmailService
from reminders.services.store import ReminderStore
from reminders.services.weather_service import WeatherService

IST = timezone(timedelta(hours=5, minutes=30))


@pytest.fixture(autouse=True)
def reminder_settings(settings):
    """
    Point external services at test values.
    An empty REDIS_URL keeps the dispatch guard in-process.
    """
    settings.REDIS_URL = ""
    settings.REMINDER_STORE_URL = "https://umbrella-test.firebaseio.com"
    settings.REMINDER_STORE_PATH = "reminders"
    settings.REMINDER_STORE_AUTH = ""
    settings.REMINDER_STORE_TIMEOUT = 10.0
    settings.REMINDER_TICK_LOCK_TIMEOUT = 120
    settings.REMINDER_DISPATCH_MARKER_TTL = 3600
    settings.WEATHER_API_TIMEOUT = 10.0
    settings.REMINDER_UTC_OFFSET_MINUTES = 330
    settings.REMINDER_TICK_INTERVAL = 60
    settings.WEATHER_API_KEY = "test-key"
    settings.WEATHER_API_URL = "https://api.openweathermap.org/data/2.5"
    settings.DEFAULT_FROM_EMAIL = "umbrella@example.com"
    return settings


@pytest.fixture
def ist_time():
    """Build an aware datetime at the given IST wall-clock time."""

    def make(hour, minute, second=0, day=19):
        return datetime(2026, 10, day, hour, minute, second, tzinfo=IST)

    return make


@pytest.fixture
def mock_store():
    """ReminderStore double returning no reminders by default."""
    store = Mock(spec=ReminderStore)
    store.read_all.return_value = {}
    return store


@pytest.fixture
def mock_weather_service():
    return Mock(spec=WeatherService)


@pytest.fixture
def mock_email_service():
    """EmailService double that reports success."""
    service = Mock(spec=EmailService)
    service.send.return_value = None
    return service


@pytest.fixture
def guard():
    """In-process dispatch guard."""
    return DispatchGuard(redis_url="")
