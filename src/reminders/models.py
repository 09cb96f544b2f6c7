"""
Value objects for the Umbrella Reminder dispatch engine.

Reminders are owned by an external document store, so nothing here is a
Django model. Everything is an immutable dataclass produced fresh per tick.
"""

from dataclasses import asdict, dataclass, field

from reminders.exceptions import DispatchError


@dataclass(frozen=True)
class Reminder:
    """
    A daily weather reminder as stored by the signup form.

    `time` is a 24-hour "HH:MM" string in the configured fixed offset and is
    compared verbatim against the scheduler clock.
    """

    id: str
    email: str
    city: str
    time: str

    @property
    def lookup_city(self) -> str:
        """City name with any trailing ", Region/Country" qualifier removed."""
        return self.city.split(",", 1)[0].strip()


@dataclass(frozen=True)
class WeatherSnapshot:
    """Normalized current weather for one city."""

    temperature: float
    condition: str
    description: str

    @property
    def is_rain(self) -> bool:
        return "rain" in self.condition.lower()


@dataclass(frozen=True)
class Message:
    """A composed email, ready for the dispatcher."""

    sender: str
    recipient: str
    subject: str
    text_body: str
    html_body: str


@dataclass(frozen=True)
class Failure:
    """Result value for an operation that failed without raising."""

    error: DispatchError

    @property
    def reason(self) -> str:
        return str(self.error)

    def __str__(self):
        return f"{type(self.error).__name__}: {self.reason}"


@dataclass
class TickReport:
    """Counters describing one scheduler tick."""

    current_time: str
    reminders: int = 0
    matched: int = 0
    sent: int = 0
    duplicates: int = 0
    weather_failures: int = 0
    delivery_failures: int = 0
    skipped: bool = False
    store_failed: bool = False
    failed_reminders: list[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return asdict(self)
