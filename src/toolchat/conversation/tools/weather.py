"""
Weather tool for the toolchat agentic loop.

Uses the Open-Meteo API (https://open-meteo.com/) which is free and requires
no API key.  Two endpoints are chained:

1. **Geocoding**: resolves a human-readable location string to coordinates
   and a timezone.  ``https://geocoding-api.open-meteo.com/v1/search``

2. **Forecast**: returns a 7-day daily forecast for those coordinates.
   ``https://api.open-meteo.com/v1/forecast``

The ``WeatherTool`` class exposes:

- ``WeatherTool.TOOL_DEFINITION``: a ``ToolDefinition`` ready to be passed
  to ``AgenticLoop.run_turn()``.
- ``WeatherTool.get_forecast(location)``: performs the two-step fetch and
  returns structured days.
- ``WeatherTool.get_weather(location)``: renders the forecast as text, one
  line per day, and never raises for expected failures.
- ``WeatherTool.as_dispatcher_entry()``: returns a handler suitable for
  ``ToolRegistry``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

import httpx

from toolchat.conversation.providers import ToolDefinition
from toolchat.conversation.tools.registry import ToolArguments

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# API endpoints
# ---------------------------------------------------------------------------

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

FORECAST_DAYS = 7

TemperatureUnit = Literal["fahrenheit", "celsius"]

_UNIT_SYMBOLS: dict[str, str] = {"fahrenheit": "°F", "celsius": "°C"}

# ---------------------------------------------------------------------------
# WMO weather interpretation codes → human-readable conditions
# Source: https://open-meteo.com/en/docs (WMO Weather Code table)
# ---------------------------------------------------------------------------

WMO_CONDITIONS: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snowfall",
    73: "Moderate snowfall",
    75: "Heavy snowfall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with hail",
    99: "Severe thunderstorm with hail",
}


UNKNOWN_CONDITIONS = "Unknown conditions"


def describe_weather_code(code: int) -> str:
    return WMO_CONDITIONS.get(code, f"Unknown conditions (code {code})")


def _format_temperature(value: float | None, symbol: str) -> str:
    # Open-Meteo sends null for days it has no data for.
    return "n/a" if value is None else f"{value:.1f}{symbol}"


class LocationNotFoundError(ValueError):
    """Raised when the geocoder returns no match for a location."""


@dataclass
class Place:
    latitude: float
    longitude: float
    timezone: str


@dataclass
class DailyForecast:
    date: str
    conditions: str
    temperature_max: float | None
    temperature_min: float | None


class WeatherTool:
    """Fetches a 7-day forecast using Open-Meteo (no API key required).

    Attributes:
        TOOL_DEFINITION: Ready-to-use ``ToolDefinition`` for ``AgenticLoop``.
        timeout: HTTP request timeout in seconds (default 10).
        temperature_unit: ``"fahrenheit"`` or ``"celsius"``.
    """

    TOOL_DEFINITION: ToolDefinition = ToolDefinition(
        name="get_weather",
        description="Returns a 7-day weather forecast for the specified location.",
        parameters={
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": (
                        "City or place to retrieve the forecast for. "
                        "Examples: 'Kansas City', 'London', 'Paris'."
                    ),
                }
            },
            "required": ["location"],
        },
    )

    class Arguments(ToolArguments):
        location: str

    def __init__(
        self,
        timeout: float = 10.0,
        temperature_unit: TemperatureUnit = "fahrenheit",
        geocoding_url: str = GEOCODING_URL,
        forecast_url: str = FORECAST_URL,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.temperature_unit = temperature_unit
        self.geocoding_url = geocoding_url
        self.forecast_url = forecast_url
        self._transport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_forecast(self, location: str) -> tuple[Place, list[DailyForecast]]:
        """Geocode *location* and fetch its daily forecast.

        Raises:
            LocationNotFoundError: If the location cannot be geocoded.
            httpx.HTTPStatusError: If either API call returns a non-2xx status.
            httpx.TransportError: If a request fails or times out.
            ValueError: If a response body cannot be decoded.
        """
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            place = self._geocode(client, location)
            return place, self._fetch_daily(client, place)

    def get_weather(self, location: str) -> str:
        """Return the forecast for *location* as text, one line per day.

        Expected failures (unknown location, HTTP errors, timeouts) are
        returned as explanatory text rather than raised.
        """
        location = location.strip()
        if not location:
            return "Location not specified."

        try:
            place, days = self.get_forecast(location)
        except LocationNotFoundError as exc:
            return f"Error geocoding location '{location}': {exc}"
        except httpx.HTTPStatusError as exc:
            logger.error("Weather API HTTP error: %s", exc)
            return (
                f"Error fetching forecast for '{location}': "
                f"weather service returned {exc.response.status_code}"
            )
        except httpx.TimeoutException:
            logger.error("Weather API timed out for location: %r", location)
            return f"Error fetching forecast for '{location}': weather service timed out"
        except httpx.TransportError as exc:
            logger.error("Weather API request failed: %s", exc)
            return f"Error fetching forecast for '{location}': {exc}"
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Unexpected weather API response: %s", exc)
            return f"Error fetching forecast for '{location}': unexpected response ({exc})"

        if not days:
            return f"No daily forecast found for {location}"

        symbol = _UNIT_SYMBOLS[self.temperature_unit]
        lines = [f"7-Day forecast for {location} (timezone: {place.timezone}):", ""]
        for day in days:
            lines.append(
                f"{day.date}: {day.conditions}, "
                f"{_format_temperature(day.temperature_max, symbol)} / "
                f"{_format_temperature(day.temperature_min, symbol)}"
            )
        return "\n".join(lines) + "\n"

    def as_dispatcher_entry(self):
        """Return a handler for use with ``ToolRegistry``.

        Usage::

            weather = WeatherTool()
            registry.register(
                WeatherTool.TOOL_DEFINITION, WeatherTool.Arguments, weather.as_dispatcher_entry()
            )
        """

        def _call(args: WeatherTool.Arguments) -> str:
            return self.get_weather(args.location)

        return _call

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _geocode(self, client: httpx.Client, location: str) -> Place:
        """Resolve *location* to coordinates and timezone.

        Raises:
            LocationNotFoundError: If no matching location is found.
            httpx.HTTPStatusError: On non-2xx response.
        """
        logger.debug("Geocoding location: %r", location)
        response = client.get(
            self.geocoding_url,
            params={"name": location, "count": 1, "language": "en", "format": "json"},
        )
        response.raise_for_status()
        data: dict[str, Any] = response.json()

        results = data.get("results")
        if not results:
            raise LocationNotFoundError(f"no geocoding results for '{location}'")

        best = results[0]
        place = Place(
            latitude=float(best["latitude"]),
            longitude=float(best["longitude"]),
            timezone=best.get("timezone") or "auto",
        )
        logger.debug(
            "Geocoded %r → (%.4f, %.4f) %s",
            location,
            place.latitude,
            place.longitude,
            place.timezone,
        )
        return place

    def _fetch_daily(self, client: httpx.Client, place: Place) -> list[DailyForecast]:
        """Fetch the daily forecast for *place*.

        Raises:
            httpx.HTTPStatusError: On non-2xx response.
            KeyError: If the response lacks the requested daily arrays.
        """
        logger.debug("Fetching forecast for (%.4f, %.4f)", place.latitude, place.longitude)
        response = client.get(
            self.forecast_url,
            params={
                "latitude": f"{place.latitude:.4f}",
                "longitude": f"{place.longitude:.4f}",
                "daily": "weathercode,temperature_2m_max,temperature_2m_min",
                "timezone": place.timezone,
                "temperature_unit": self.temperature_unit,
                "forecast_days": FORECAST_DAYS,
            },
        )
        response.raise_for_status()
        daily = response.json().get("daily") or {}

        dates = daily.get("time") or []
        codes = daily["weathercode"] if dates else []
        maxima = daily["temperature_2m_max"] if dates else []
        minima = daily["temperature_2m_min"] if dates else []

        return [
            DailyForecast(
                date=date,
                conditions=(
                    describe_weather_code(int(code)) if code is not None else UNKNOWN_CONDITIONS
                ),
                temperature_max=None if max_t is None else float(max_t),
                temperature_min=None if min_t is None else float(min_t),
            )
            for date, code, max_t, min_t in zip(dates, codes, maxima, minima)
        ]
