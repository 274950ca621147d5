import logging
from datetime import datetime, timezone

import httpx

from conditions import code_to_condition, convert_pressure, convert_visibility
from errors import WeatherFetchError
from models import ToolInvocation, WeatherReading

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

CURRENT_FIELDS = [
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "precipitation",
    "weather_code",
    "cloud_cover",
    "pressure_msl",
    "surface_pressure",
    "wind_speed_10m",
    "wind_direction_10m",
    "visibility",
]

WEATHER_TOOL = {
    "type": "function",
    "function": {
        "name": "get_weather_data",
        "description": "Fetch current weather data for a specific location using the Open-Meteo API.",
        "parameters": {
            "type": "object",
            "properties": {
                "latitude": {
                    "type": "number",
                    "description": "Latitude coordinate of the location",
                },
                "longitude": {
                    "type": "number",
                    "description": "Longitude coordinate of the location",
                },
                "location_name": {
                    "type": "string",
                    "description": "Human-readable name of the location",
                },
                "temperature_unit": {
                    "type": "string",
                    "enum": ["celsius", "fahrenheit"],
                    "description": "Temperature unit preference",
                },
                "wind_unit": {
                    "type": "string",
                    "enum": ["kmh", "mph"],
                    "description": "Wind speed unit preference",
                },
                "pressure_unit": {
                    "type": "string",
                    "enum": ["hPa", "mb"],
                    "description": "Pressure unit preference",
                },
                "visibility_unit": {
                    "type": "string",
                    "enum": ["km", "miles"],
                    "description": "Visibility unit preference",
                },
            },
            "required": ["latitude", "longitude", "location_name"],
            "additionalProperties": False,
        },
    },
}

TOOL_LIST = [WEATHER_TOOL]


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _to_reading(
    invocation: ToolInvocation, current: dict, correct_mb_conversion: bool
) -> WeatherReading:
    temperature = current["temperature_2m"]
    condition = code_to_condition(int(current["weather_code"]))
    symbol = "C" if invocation.temperature_unit == "celsius" else "F"

    return WeatherReading(
        location=invocation.location_name,
        temperature=temperature,
        temperature_unit=invocation.temperature_unit,
        condition=condition,
        humidity=current["relative_humidity_2m"],
        wind_speed=current["wind_speed_10m"],
        wind_unit=invocation.wind_unit,
        wind_direction=current["wind_direction_10m"],
        pressure=convert_pressure(
            current["pressure_msl"], invocation.pressure_unit, corrected=correct_mb_conversion
        ),
        pressure_unit=invocation.pressure_unit,
        visibility=convert_visibility(current.get("visibility") or 0.0, invocation.visibility_unit),
        visibility_unit=invocation.visibility_unit,
        uv_index=0,  # Open-Meteo has no UV index among current conditions
        feels_like=current["apparent_temperature"],
        cloud_cover=current.get("cloud_cover") or 0.0,
        precipitation=current.get("precipitation") or 0.0,
        description=(
            f"Current weather in {invocation.location_name}: {condition} "
            f"with temperature of {temperature:g}°{symbol}"
        ),
        timestamp=_utc_timestamp(),
    )


async def fetch_weather_data(
    invocation: ToolInvocation,
    base_url: str = OPEN_METEO_URL,
    timeout: float = 10.0,
    correct_mb_conversion: bool = False,
) -> WeatherReading:
    """Fetch current conditions from Open-Meteo. Raises WeatherFetchError, never retries."""
    params = {
        "latitude": invocation.latitude,
        "longitude": invocation.longitude,
        "current": ",".join(CURRENT_FIELDS),
        "temperature_unit": invocation.temperature_unit,
        "wind_speed_unit": invocation.wind_unit,
        "precipitation_unit": "mm",
    }
    location = invocation.location_name

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(base_url, params=params, timeout=timeout)
    except httpx.TimeoutException as exc:
        logger.error("Open-Meteo timeout for location=%r", location)
        raise WeatherFetchError("Weather service timed out.") from exc
    except httpx.RequestError as exc:
        logger.error("Open-Meteo unreachable for location=%r: %s", location, exc)
        raise WeatherFetchError("Weather service is unreachable.") from exc

    try:
        body = response.json()
    except ValueError:
        body = None

    if not response.is_success:
        reason = body.get("reason") if isinstance(body, dict) else None
        reason = reason or "Unknown error"
        logger.error(
            "Open-Meteo error %d: location=%r, reason=%s",
            response.status_code,
            location,
            reason,
        )
        raise WeatherFetchError(f"Weather API error: {reason}")

    if not isinstance(body, dict) or not isinstance(body.get("current"), dict):
        logger.error("Open-Meteo returned a malformed body for location=%r", location)
        raise WeatherFetchError("Weather API returned a malformed response.")

    try:
        reading = _to_reading(invocation, body["current"], correct_mb_conversion)
    except (KeyError, TypeError, ValueError) as exc:
        logger.error("Open-Meteo current block incomplete for location=%r: %s", location, exc)
        raise WeatherFetchError("Weather API returned a malformed response.") from exc

    logger.info(
        "Weather fetched: location=%r, condition=%r, temperature=%s",
        location,
        reading.condition,
        reading.temperature,
    )
    return reading
