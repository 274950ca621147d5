"""
frontend/app.py: Streamlit page for the Weather Query Agent.

Posts the user's question to the backend's POST /weather-query and renders the
structured report (current conditions, summary, recommendations).
"""

import os
from datetime import datetime
from pathlib import Path

import httpx
import streamlit as st
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

BACKEND_PORT = int(os.getenv("BACKEND_PORT", "8001"))
WEATHER_QUERY_URL = f"http://localhost:{BACKEND_PORT}/weather-query"

EXAMPLE_QUERIES = [
    "What's the weather in Paris?",
    "How's the weather in New York City?",
    "Tell me about the weather in Tokyo",
    "Weather forecast for London",
    "Is it raining in San Francisco?",
    "Current weather in Sydney, Australia",
]

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def wind_direction(degrees: float) -> str:
    return COMPASS_POINTS[round(degrees / 22.5) % 16]


def condition_icon(condition: str) -> str:
    condition = condition.lower()
    if "rain" in condition or "drizzle" in condition:
        return "🌧️"
    if "snow" in condition:
        return "🌨️"
    if "thunder" in condition:
        return "⛈️"
    if "fog" in condition:
        return "🌫️"
    if "cloud" in condition or "overcast" in condition:
        return "☁️"
    if "clear" in condition:
        return "☀️"
    return "🌥️"


def format_timestamp(value: str) -> str:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M UTC")
    except ValueError:
        return value


def render_report(report: dict) -> None:
    weather = report["weather_data"]
    symbol = "C" if weather["temperature_unit"] == "celsius" else "F"

    st.subheader(f"{condition_icon(weather['condition'])} {weather['location']}")
    st.write(report["summary"])

    col1, col2, col3 = st.columns(3)
    col1.metric("Temperature", f"{weather['temperature']}°{symbol}")
    col1.caption(f"Feels like {weather['feels_like']}°{symbol} · {weather['condition']}")
    col2.metric("Humidity", f"{weather['humidity']}%")
    col2.metric(
        "Wind",
        f"{weather['wind_speed']} {weather['wind_unit']} {wind_direction(weather['wind_direction'])}",
    )
    col3.metric("Pressure", f"{weather['pressure']:.2f} {weather['pressure_unit']}")
    col3.metric("Visibility", f"{weather['visibility']:.1f} {weather['visibility_unit']}")

    st.markdown(f"**Description:** {weather['description']}")
    st.caption(f"Last updated: {format_timestamp(weather['timestamp'])}")

    if report["recommendations"]:
        st.markdown("#### Recommendations")
        for recommendation in report["recommendations"]:
            st.markdown(f"- {recommendation}")

    if report["additional_info"]:
        st.markdown("#### Additional information")
        st.info(report["additional_info"])


def ask_backend(query: str) -> tuple[dict | None, str | None]:
    """POST the query; returns (body, error_message)."""
    try:
        with httpx.Client(timeout=60.0) as client:
            response = client.post(WEATHER_QUERY_URL, json={"query": query})
    except httpx.ConnectError:
        return None, "Could not connect to the weather agent. Is it running?"
    except httpx.HTTPError as exc:
        return None, str(exc)

    try:
        body = response.json()
    except ValueError:
        return None, f"Agent returned error {response.status_code}."

    if response.status_code != 200:
        error = body.get("error", "Failed to fetch weather data")
        details = body.get("details")
        return None, f"{error}: {details}" if details else error
    return body, None


st.set_page_config(page_title="Weather Agent", page_icon="⛅", layout="centered")
st.title("⛅ Weather Agent")
st.caption("Ask about the current weather anywhere, in plain language.")

# ── Session state ──────────────────────────────────────────────────────────────

if "query" not in st.session_state:
    st.session_state.query = ""
if "result" not in st.session_state:
    st.session_state.result = None
if "error" not in st.session_state:
    st.session_state.error = None


def use_example(example: str) -> None:
    st.session_state.query = example


# ── Query form ─────────────────────────────────────────────────────────────────

with st.form("weather-query"):
    st.text_input("Weather query", key="query", placeholder=EXAMPLE_QUERIES[0])
    submitted = st.form_submit_button("Get weather")

st.write("Try these examples:")
example_columns = st.columns(3)
for index, example in enumerate(EXAMPLE_QUERIES):
    example_columns[index % 3].button(
        example, key=f"example-{index}", on_click=use_example, args=(example,)
    )

if submitted:
    query = st.session_state.query.strip()
    st.session_state.result = None
    st.session_state.error = None
    if query:
        with st.spinner("Fetching weather..."):
            body, error = ask_backend(query)
        st.session_state.result = body
        st.session_state.error = error

# ── Result ─────────────────────────────────────────────────────────────────────

if st.session_state.error:
    st.error(st.session_state.error)
elif st.session_state.result:
    result = st.session_state.result
    if result.get("data"):
        render_report(result["data"])
    else:
        st.info(result.get("message", "No weather data received."))
