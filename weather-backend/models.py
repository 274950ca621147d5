from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TemperatureUnit = Literal["celsius", "fahrenheit"]
WindUnit = Literal["kmh", "mph"]
PressureUnit = Literal["hPa", "mb"]
VisibilityUnit = Literal["km", "miles"]


class WeatherQueryRequest(BaseModel):
    query: str


class ToolInvocation(BaseModel):
    """Arguments of a get_weather_data tool call."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    location_name: str = Field(..., min_length=1)
    temperature_unit: TemperatureUnit = "celsius"
    wind_unit: WindUnit = "kmh"
    pressure_unit: PressureUnit = "hPa"
    visibility_unit: VisibilityUnit = "km"

    @field_validator(
        "temperature_unit", "wind_unit", "pressure_unit", "visibility_unit", mode="before"
    )
    @classmethod
    def _null_unit_uses_default(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class WeatherReading(BaseModel):
    """Current conditions for one location, values already in the stated units."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    location: str
    temperature: float
    temperature_unit: TemperatureUnit
    condition: str
    humidity: float
    wind_speed: float
    wind_unit: WindUnit
    wind_direction: float
    pressure: float
    pressure_unit: PressureUnit
    visibility: float
    visibility_unit: VisibilityUnit
    uv_index: float = 0
    feels_like: float
    cloud_cover: float
    precipitation: float
    description: str
    timestamp: str

    @field_validator("wind_direction")
    @classmethod
    def _normalize_wind_direction(cls, value: float) -> float:
        return value % 360


class StructuredResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    weather_data: WeatherReading
    summary: str = Field(..., min_length=1)
    recommendations: list[str]
    additional_info: str


class WeatherReport(BaseModel):
    data: StructuredResponse
    raw_weather: WeatherReading


class WeatherQueryResponse(BaseModel):
    success: bool = True
    data: StructuredResponse | None = None
    raw_weather: WeatherReading | None = None
    message: str | None = None


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


class HealthResponse(BaseModel):
    status: str
    model: str
    weather_api_url: str
    api_key_configured: bool


# Sent to the model as a strict json_schema response format; mirrors StructuredResponse.
_NUMBER = {"type": "number"}
_STRING = {"type": "string"}

WEATHER_DATA_SCHEMA = {
    "type": "object",
    "properties": {
        "location": _STRING,
        "temperature": _NUMBER,
        "temperature_unit": {"type": "string", "enum": ["celsius", "fahrenheit"]},
        "condition": _STRING,
        "humidity": _NUMBER,
        "wind_speed": _NUMBER,
        "wind_unit": {"type": "string", "enum": ["kmh", "mph"]},
        "wind_direction": _NUMBER,
        "pressure": _NUMBER,
        "pressure_unit": {"type": "string", "enum": ["hPa", "mb"]},
        "visibility": _NUMBER,
        "visibility_unit": {"type": "string", "enum": ["km", "miles"]},
        "uv_index": _NUMBER,
        "feels_like": _NUMBER,
        "cloud_cover": _NUMBER,
        "precipitation": _NUMBER,
        "description": _STRING,
        "timestamp": _STRING,
    },
    "required": [
        "location",
        "temperature",
        "temperature_unit",
        "condition",
        "humidity",
        "wind_speed",
        "wind_unit",
        "wind_direction",
        "pressure",
        "pressure_unit",
        "visibility",
        "visibility_unit",
        "uv_index",
        "feels_like",
        "cloud_cover",
        "precipitation",
        "description",
        "timestamp",
    ],
    "additionalProperties": False,
}

STRUCTURED_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "weather_data": WEATHER_DATA_SCHEMA,
        "summary": {"type": "string", "description": "Brief weather summary"},
        "recommendations": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Weather-based recommendations (e.g., clothing, activities)",
        },
        "additional_info": {
            "type": "string",
            "description": "Any additional helpful information",
        },
    },
    "required": ["weather_data", "summary", "recommendations", "additional_info"],
    "additionalProperties": False,
}

RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "weather_response",
        "schema": STRUCTURED_RESPONSE_SCHEMA,
        "strict": True,
    },
}
