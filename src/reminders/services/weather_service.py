"""
WeatherService: current weather lookup against OpenWeatherMap.

Every call goes to the API. Snapshots are never cached, since a reminder
should describe the weather at the moment it is sent.
"""

import logging
import numbers

import requests
from django.conf import settings

from reminders.exceptions import WeatherLookupFailed
from reminders.models import Failure, WeatherSnapshot

logger = logging.getLogger(__name__)


class WeatherService:
    """Service for fetching current weather from OpenWeatherMap API."""

    def __init__(self):
        self.base_url = settings.WEATHER_API_URL.rstrip("/")
        self.api_key = settings.WEATHER_API_KEY
        self.timeout = settings.WEATHER_API_TIMEOUT

    def fetch_weather(self, city: str) -> WeatherSnapshot | Failure:
        """
        Fetch current weather for a city.

        Args:
            city: City name as accepted by the `q` parameter (no region suffix)

        Returns:
            WeatherSnapshot on success, Failure(WeatherLookupFailed) otherwise.
            Never raises.
        """
        try:
            api_data = self._request_current(city)
            snapshot = self._parse_current_response(api_data)
        except WeatherLookupFailed as e:
            logger.error(f"Weather lookup failed for '{city}': {e}")
            return Failure(e)

        logger.info(
            f"Weather for {city}: {snapshot.condition}, {snapshot.temperature}°C"
        )
        return snapshot

    def _request_current(self, city: str) -> dict:
        url = f"{self.base_url}/weather"
        params = {
            "q": city,
            "appid": self.api_key,
            "units": "metric",
        }

        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise WeatherLookupFailed(f"API returned {status}") from e
        except ValueError as e:
            # requests.JSONDecodeError is also a RequestException
            raise WeatherLookupFailed(f"Invalid JSON in API response: {e}") from e
        except requests.RequestException as e:
            raise WeatherLookupFailed(f"API request failed: {e}") from e

    def _parse_current_response(self, api_data: dict) -> WeatherSnapshot:
        """
        Parse an OpenWeatherMap current weather response.

        Only `main.temp`, `weather[0].main` and `weather[0].description` are
        read; anything else in the payload is ignored.
        """
        try:
            temperature = api_data["main"]["temp"]
            weather = api_data["weather"][0]
            condition = weather["main"]
            description = weather["description"]
        except (KeyError, IndexError, TypeError) as e:
            raise WeatherLookupFailed(f"Malformed API response: missing {e}") from e

        # bool is a Number subclass
        if isinstance(temperature, bool) or not isinstance(temperature, numbers.Real):
            raise WeatherLookupFailed(f"Malformed API response: temp={temperature!r}")
        if not isinstance(condition, str) or not isinstance(description, str):
            raise WeatherLookupFailed("Malformed API response: weather labels")

        return WeatherSnapshot(
            temperature=temperature,
            condition=condition,
            description=description,
        )
