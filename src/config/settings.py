"""
Django settings for the Umbrella Reminder dispatch engine.
"""

import os
from pathlib import Path
from celery.schedules import crontab
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-dev-key-change-in-production"
)

DEBUG = os.environ.get("DEBUG", "True").lower() == "true"

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

# Application definition
INSTALLED_APPS = [
    # Local apps
    "reminders",
]

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {},
    },
]

# Reminders live in an external document store, no local database is used.
DATABASES = {}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

# Redis Configuration
# Holds the tick lock and per-reminder dispatch markers (database 0)
REDIS_URL = os.environ.get(
    "REDIS_URL",
    "redis://localhost:6379/0",
)

# Redis for Celery broker (database 1)
CELERY_BROKER_URL = os.environ.get(
    "CELERY_BROKER_URL",
    "redis://localhost:6379/1",
)

# Celery result backend (same as broker, database 1)
CELERY_RESULT_BACKEND = os.environ.get(
    "CELERY_RESULT_BACKEND",
    "redis://localhost:6379/1",
)

# Email Configuration
EMAIL_BACKEND = os.environ.get(
    "EMAIL_BACKEND", "django.core.mail.backends.smtp.EmailBackend"
)
EMAIL_HOST = os.environ.get("EMAIL_HOST", "smtp.gmail.com")
EMAIL_PORT = int(os.environ.get("EMAIL_PORT", 587))
EMAIL_USE_TLS = os.environ.get("EMAIL_USE_TLS", "True").lower() == "true"
EMAIL_HOST_USER = os.environ.get("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_HOST_PASSWORD", "")
EMAIL_TIMEOUT = int(os.environ.get("EMAIL_TIMEOUT", 10))
DEFAULT_FROM_EMAIL = os.environ.get(
    "DEFAULT_FROM_EMAIL", EMAIL_HOST_USER or "noreply@umbrellareminder.local"
)

# Weather API Configuration
WEATHER_API_KEY = os.environ.get("WEATHER_API_KEY", "")
WEATHER_API_URL = os.environ.get(
    "WEATHER_API_URL", "https://api.openweathermap.org/data/2.5"
)
WEATHER_API_TIMEOUT = float(os.environ.get("WEATHER_API_TIMEOUT", 10))

# Reminder store (Firebase Realtime Database REST API)
REMINDER_STORE_URL = os.environ.get(
    "REMINDER_STORE_URL", os.environ.get("FIREBASE_DATABASE_URL", "")
)
REMINDER_STORE_PATH = os.environ.get("REMINDER_STORE_PATH", "reminders")
REMINDER_STORE_AUTH = os.environ.get("REMINDER_STORE_AUTH", "")
REMINDER_STORE_TIMEOUT = float(os.environ.get("REMINDER_STORE_TIMEOUT", 10))

# Dispatch scheduler
REMINDER_UTC_OFFSET_MINUTES = int(
    os.environ.get("REMINDER_UTC_OFFSET_MINUTES", 330)
)  # IST, UTC+5:30
REMINDER_TICK_INTERVAL = int(os.environ.get("REMINDER_TICK_INTERVAL", 60))
REMINDER_TICK_LOCK_TIMEOUT = int(os.environ.get("REMINDER_TICK_LOCK_TIMEOUT", 120))
REMINDER_DISPATCH_MARKER_TTL = int(
    os.environ.get("REMINDER_DISPATCH_MARKER_TTL", 3600)
)

# Beat fires on the clock minute like cron "* * * * *". A run that has not
# started within one interval expires, so missed minutes are never replayed.
CELERY_BEAT_SCHEDULE = {
    "dispatch-due-reminders": {
        "task": "reminders.dispatch_due_reminders",
        "schedule": (
            crontab() if REMINDER_TICK_INTERVAL == 60 else float(REMINDER_TICK_INTERVAL)
        ),
        "options": {"expires": REMINDER_TICK_INTERVAL},
    },
}

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "reminders": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}
