"""WMO weather-code lookup and unit conversions for Open-Meteo readings."""

WEATHER_CONDITIONS: dict[int, str] = {
    0: "clear sky",
    1: "mainly clear",
    2: "partly cloudy",
    3: "overcast",
    45: "fog",
    48: "depositing rime fog",
    51: "light drizzle",
    53: "moderate drizzle",
    55: "dense drizzle",
    56: "light freezing drizzle",
    57: "dense freezing drizzle",
    61: "slight rain",
    63: "moderate rain",
    65: "heavy rain",
    66: "light freezing rain",
    67: "heavy freezing rain",
    71: "slight snow fall",
    73: "moderate snow fall",
    75: "heavy snow fall",
    77: "snow grains",
    80: "slight rain showers",
    81: "moderate rain showers",
    82: "violent rain showers",
    85: "slight snow showers",
    86: "heavy snow showers",
    95: "thunderstorm",
    96: "thunderstorm with slight hail",
    99: "thunderstorm with heavy hail",
}

UNKNOWN_CONDITION = "unknown"

# Applied for "mb" unless the corrected conversion is enabled.
MB_FACTOR = 0.01
MILES_PER_KM = 0.621371


def code_to_condition(code: int) -> str:
    return WEATHER_CONDITIONS.get(code, UNKNOWN_CONDITION)


def convert_pressure(hpa: float, unit: str, corrected: bool = False) -> float:
    """Convert a pressure reported in hPa into ``unit``.

    "mb" multiplies by ``MB_FACTOR``, which is how readings have always been
    reported. With ``corrected`` set, "mb" is treated as identical to hPa.
    """
    if unit == "hPa":
        return hpa
    if unit == "mb":
        return hpa if corrected else hpa * MB_FACTOR
    raise ValueError(f"unsupported pressure unit: {unit!r}")


def convert_visibility(km: float, unit: str) -> float:
    if unit == "km":
        return km
    if unit == "miles":
        return km * MILES_PER_KM
    raise ValueError(f"unsupported visibility unit: {unit!r}")
