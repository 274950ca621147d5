import json
import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

# Ensure weather-backend/ is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from models import StructuredResponse, WeatherReading, WeatherReport  # noqa: E402

PARIS_ARGS = {"latitude": 48.8566, "longitude": 2.3522, "location_name": "Paris"}

OPEN_METEO_CURRENT = {
    "time": "2026-10-18T12:00",
    "interval": 900,
    "temperature_2m": 18.5,
    "relative_humidity_2m": 65,
    "apparent_temperature": 17.9,
    "precipitation": 0.0,
    "weather_code": 2,
    "cloud_cover": 40,
    "pressure_msl": 1013.2,
    "surface_pressure": 1008.1,
    "wind_speed_10m": 12.3,
    "wind_direction_10m": 250,
    "visibility": 24.14,
}

MOCK_OPEN_METEO_SUCCESS = {
    "latitude": 48.86,
    "longitude": 2.3399997,
    "generationtime_ms": 0.05,
    "utc_offset_seconds": 0,
    "timezone": "GMT",
    "elevation": 43.0,
    "current": OPEN_METEO_CURRENT,
}


@pytest.fixture
def paris_reading() -> WeatherReading:
    return WeatherReading(
        location="Paris",
        temperature=18.5,
        temperature_unit="celsius",
        condition="partly cloudy",
        humidity=65,
        wind_speed=12.3,
        wind_unit="kmh",
        wind_direction=250,
        pressure=1013.2,
        pressure_unit="hPa",
        visibility=24.14,
        visibility_unit="km",
        uv_index=0,
        feels_like=17.9,
        cloud_cover=40,
        precipitation=0.0,
        description="Current weather in Paris: partly cloudy with temperature of 18.5°C",
        timestamp="2026-10-18T12:00:00.000Z",
    )


@pytest.fixture
def structured_payload(paris_reading) -> dict:
    return {
        "weather_data": paris_reading.model_dump(),
        "summary": "Mild and partly cloudy in Paris.",
        "recommendations": [
            "Bring a light jacket.",
            "Good afternoon for a walk along the Seine.",
            "No umbrella needed.",
        ],
        "additional_info": "Winds from the west-southwest at 12 km/h.",
    }


@pytest.fixture
def paris_report(paris_reading, structured_payload) -> WeatherReport:
    return WeatherReport(
        data=StructuredResponse.model_validate(structured_payload),
        raw_weather=paris_reading,
    )


# ── Chat client mocks ─────────────────────────────────────────────────────────

def make_tool_call(arguments: str, name: str = "get_weather_data", call_id: str = "call_abc123"):
    tc = MagicMock()
    tc.id = call_id
    tc.function.name = name
    tc.function.arguments = arguments
    return tc


def make_completion(content: str | None = None, tool_calls=None, refusal: str | None = None):
    choice = MagicMock()
    choice.finish_reason = "tool_calls" if tool_calls else "stop"
    choice.message.content = content
    choice.message.tool_calls = tool_calls
    choice.message.refusal = refusal
    resp = MagicMock()
    resp.choices = [choice]
    return resp


def make_tool_response(args: dict):
    return make_completion(tool_calls=[make_tool_call(json.dumps(args))])


def make_mock_client():
    mock_client = MagicMock()
    mock_client.chat.completions.create = AsyncMock()
    return mock_client
