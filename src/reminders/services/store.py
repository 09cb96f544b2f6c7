"""
ReminderStore: read-only access to reminders kept in Firebase Realtime Database.

The signup form pushes `{email, city, time}` records under a single path.
The REST API returns the whole collection as one JSON object keyed by push
id, or `null` when the collection is empty.
"""

import logging

import requests
from django.conf import settings

from reminders.exceptions import StoreUnavailable
from reminders.models import Reminder

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("email", "city", "time")


class ReminderStore:
    """Adapter over the Firebase Realtime Database REST endpoint."""

    def __init__(self, base_url: str | None = None, path: str | None = None):
        self.base_url = (base_url or settings.REMINDER_STORE_URL).rstrip("/")
        self.path = (path or settings.REMINDER_STORE_PATH).strip("/")
        self.auth = settings.REMINDER_STORE_AUTH
        self.timeout = settings.REMINDER_STORE_TIMEOUT

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.path}.json"

    def read_all(self) -> dict[str, Reminder]:
        """
        Read every stored reminder.

        Returns:
            Mapping of reminder id to Reminder. Empty when nothing is stored.

        Raises:
            StoreUnavailable: If the store is not configured, unreachable,
                or returns something other than a JSON object.
        """
        if not self.base_url:
            raise StoreUnavailable("Reminder store URL is not configured")

        params = {"auth": self.auth} if self.auth else None
        try:
            response = requests.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except ValueError as e:
            raise StoreUnavailable(f"Reminder store returned invalid JSON: {e}") from e
        except requests.RequestException as e:
            raise StoreUnavailable(f"Reminder store request failed: {e}") from e

        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise StoreUnavailable(
                f"Unexpected reminder store payload: {type(payload).__name__}"
            )

        reminders = {}
        for reminder_id, record in payload.items():
            reminder = self._parse_record(reminder_id, record)
            if reminder is not None:
                reminders[reminder_id] = reminder

        logger.debug(f"Loaded {len(reminders)} of {len(payload)} stored reminders")
        return reminders

    def _parse_record(self, reminder_id: str, record) -> Reminder | None:
        if not isinstance(record, dict):
            logger.warning(f"Skipping reminder {reminder_id}: not an object")
            return None

        for name in REQUIRED_FIELDS:
            value = record.get(name)
            if not isinstance(value, str) or not value.strip():
                logger.warning(f"Skipping reminder {reminder_id}: missing '{name}'")
                return None

        return Reminder(
            id=reminder_id,
            email=record["email"].strip(),
            city=record["city"],
            time=record["time"],
        )
