"""
NotificationComposer: renders the daily weather email.

Rendering is a pure function of (recipient, weather, city) plus the sender
address from settings.
"""

from django.conf import settings
from django.template.loader import render_to_string

from reminders.models import Message, WeatherSnapshot

SUBJECT_TEMPLATE = "☂ Weather Update for {city}"

RAIN_ADVICE = "Bring your umbrella, it's rainy today!"
DRY_ADVICE = "No umbrella needed, enjoy the sunshine!"


class NotificationComposer:
    """Builds the weather reminder Message for one recipient."""

    html_template = "reminders/email/weather_update.html"
    text_template = "reminders/email/weather_update.txt"

    def compose(self, destination: str, weather: WeatherSnapshot, city: str) -> Message:
        context = {
            "city": city,
            "weather": weather,
            "umbrella_advice": RAIN_ADVICE if weather.is_rain else DRY_ADVICE,
        }
        return Message(
            sender=settings.DEFAULT_FROM_EMAIL,
            recipient=destination,
            subject=SUBJECT_TEMPLATE.format(city=city),
            text_body=render_to_string(self.text_template, context),
            html_body=render_to_string(self.html_template, context),
        )
