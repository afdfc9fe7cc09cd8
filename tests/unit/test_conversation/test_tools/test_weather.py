"""Unit tests for toolchat.conversation.tools.weather.WeatherTool.

All HTTP traffic goes through an ``httpx.MockTransport``; no network access.
"""

from __future__ import annotations

import httpx
import pytest

from toolchat.conversation.providers import ToolDefinition
from toolchat.conversation.tools.weather import (
    WMO_CONDITIONS,
    LocationNotFoundError,
    WeatherTool,
    describe_weather_code,
)

# ---------------------------------------------------------------------------
# Canned API payloads
# ---------------------------------------------------------------------------

_GEOCODE_PARIS = {
    "results": [
        {
            "name": "Paris",
            "latitude": 48.85341,
            "longitude": 2.3488,
            "timezone": "Europe/Paris",
        }
    ]
}

_FORECAST_PARIS = {
    "daily": {
        "time": ["2026-10-18", "2026-10-19"],
        "weathercode": [0, 61],
        "temperature_2m_max": [64.2, 58.0],
        "temperature_2m_min": [50.0, 47.44],
    }
}


# ---------------------------------------------------------------------------
# WMO code table
# ---------------------------------------------------------------------------


class TestDescribeWeatherCode:
    def test_known_codes(self) -> None:
        assert describe_weather_code(0) == "Clear sky"
        assert describe_weather_code(95) == "Thunderstorm"

    def test_unknown_code(self) -> None:
        assert describe_weather_code(42) == "Unknown conditions (code 42)"

    def test_table_covers_thunderstorm_with_hail(self) -> None:
        assert WMO_CONDITIONS[99] == "Severe thunderstorm with hail"


# ---------------------------------------------------------------------------
# TOOL_DEFINITION shape
# ---------------------------------------------------------------------------


class TestWeatherToolDefinition:
    def test_definition_is_tool_definition(self) -> None:
        assert isinstance(WeatherTool.TOOL_DEFINITION, ToolDefinition)

    def test_definition_name(self) -> None:
        assert WeatherTool.TOOL_DEFINITION.name == "get_weather"

    def test_location_is_required(self) -> None:
        assert WeatherTool.TOOL_DEFINITION.parameters["required"] == ["location"]


# ---------------------------------------------------------------------------
# get_weather: success
# ---------------------------------------------------------------------------


class TestGetWeatherSuccess:
    def test_renders_one_line_per_day(self, make_transport) -> None:
        transport = make_transport({"/v1/search": _GEOCODE_PARIS, "/v1/forecast": _FORECAST_PARIS})
        tool = WeatherTool(transport=transport)

        result = tool.get_weather("Paris")

        assert result == (
            "7-Day forecast for Paris (timezone: Europe/Paris):\n"
            "\n"
            "2026-10-18: Clear sky, 64.2°F / 50.0°F\n"
            "2026-10-19: Slight rain, 58.0°F / 47.4°F\n"
        )
        assert transport.paths() == ["/v1/search", "/v1/forecast"]

    def test_forecast_request_parameters(self, make_transport) -> None:
        transport = make_transport({"/v1/search": _GEOCODE_PARIS, "/v1/forecast": _FORECAST_PARIS})

        WeatherTool(transport=transport).get_weather("Paris")

        geocode, forecast = transport.requests
        assert geocode.url.params["name"] == "Paris"
        assert geocode.url.params["count"] == "1"
        assert forecast.url.params["latitude"] == "48.8534"
        assert forecast.url.params["longitude"] == "2.3488"
        assert forecast.url.params["timezone"] == "Europe/Paris"
        assert forecast.url.params["temperature_unit"] == "fahrenheit"
        assert forecast.url.params["forecast_days"] == "7"

    def test_celsius_unit(self, make_transport) -> None:
        transport = make_transport({"/v1/search": _GEOCODE_PARIS, "/v1/forecast": _FORECAST_PARIS})
        tool = WeatherTool(temperature_unit="celsius", transport=transport)

        result = tool.get_weather("Paris")

        assert "64.2°C / 50.0°C" in result
        assert transport.requests[1].url.params["temperature_unit"] == "celsius"

    def test_missing_timezone_defaults_to_auto(self, make_transport) -> None:
        geocode = {"results": [{"latitude": 1.0, "longitude": 2.0}]}
        transport = make_transport({"/v1/search": geocode, "/v1/forecast": _FORECAST_PARIS})

        result = WeatherTool(transport=transport).get_weather("Somewhere")

        assert "(timezone: auto)" in result
        assert transport.requests[1].url.params["timezone"] == "auto"

    def test_get_forecast_returns_structured_days(self, make_transport) -> None:
        transport = make_transport({"/v1/search": _GEOCODE_PARIS, "/v1/forecast": _FORECAST_PARIS})

        place, days = WeatherTool(transport=transport).get_forecast("Paris")

        assert place.timezone == "Europe/Paris"
        assert [d.conditions for d in days] == ["Clear sky", "Slight rain"]


# ---------------------------------------------------------------------------
# get_weather: failures
# ---------------------------------------------------------------------------


class TestGetWeatherFailures:
    def test_unknown_location_skips_forecast(self, make_transport) -> None:
        transport = make_transport({"/v1/search": {"results": []}, "/v1/forecast": _FORECAST_PARIS})

        result = WeatherTool(transport=transport).get_weather("Nowhere")

        assert "Nowhere" in result
        assert result.startswith("Error geocoding location 'Nowhere'")
        assert "/v1/forecast" not in transport.paths()

    def test_get_forecast_raises_for_unknown_location(self, make_transport) -> None:
        transport = make_transport({"/v1/search": {}})
        with pytest.raises(LocationNotFoundError):
            WeatherTool(transport=transport).get_forecast("Nowhere")

    def test_empty_location(self, make_transport) -> None:
        transport = make_transport({})
        assert WeatherTool(transport=transport).get_weather("   ") == "Location not specified."
        assert transport.requests == []

    def test_forecast_http_error(self, make_transport) -> None:
        transport = make_transport(
            {"/v1/search": _GEOCODE_PARIS, "/v1/forecast": httpx.Response(503, text="down")}
        )

        result = WeatherTool(transport=transport).get_weather("Paris")

        assert result == "Error fetching forecast for 'Paris': weather service returned 503"

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        tool = WeatherTool(transport=httpx.MockTransport(handler))

        assert tool.get_weather("Paris").endswith("weather service timed out")

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        tool = WeatherTool(transport=httpx.MockTransport(handler))

        assert "connection refused" in tool.get_weather("Paris")

    def test_malformed_forecast(self, make_transport) -> None:
        forecast = {"daily": {"time": ["2026-10-18"]}}
        transport = make_transport({"/v1/search": _GEOCODE_PARIS, "/v1/forecast": forecast})

        result = WeatherTool(transport=transport).get_weather("Paris")

        assert result.startswith("Error fetching forecast for 'Paris': unexpected response")

    def test_null_day_still_rendered(self, make_transport) -> None:
        forecast = {
            "daily": {
                "time": ["2026-10-18", "2026-10-19"],
                "weathercode": [0, None],
                "temperature_2m_max": [10, None],
                "temperature_2m_min": [2.5, None],
            }
        }
        transport = make_transport({"/v1/search": _GEOCODE_PARIS, "/v1/forecast": forecast})

        result = WeatherTool(transport=transport).get_weather("Paris")

        assert result.splitlines()[2:] == [
            "2026-10-18: Clear sky, 10.0°F / 2.5°F",
            "2026-10-19: Unknown conditions, n/a / n/a",
        ]

    def test_no_daily_data(self, make_transport) -> None:
        transport = make_transport({"/v1/search": _GEOCODE_PARIS, "/v1/forecast": {"daily": {}}})

        result = WeatherTool(transport=transport).get_weather("Paris")

        assert result == "No daily forecast found for Paris"


def test_dispatcher_entry(make_transport) -> None:
    transport = make_transport({"/v1/search": _GEOCODE_PARIS, "/v1/forecast": _FORECAST_PARIS})
    tool = WeatherTool(transport=transport)

    result = tool.as_dispatcher_entry()(WeatherTool.Arguments(location="Paris"))

    assert result.startswith("7-Day forecast for Paris")
