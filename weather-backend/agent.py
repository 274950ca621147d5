import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from openai import AsyncOpenAI
from pydantic import ValidationError

from errors import ConfigurationError, QueryValidationError, SchemaError, UpstreamError
from models import (
    RESPONSE_FORMAT,
    StructuredResponse,
    ToolInvocation,
    WeatherReading,
    WeatherReport,
)
from prompts import FALLBACK_MESSAGE, STRUCTURING_PROMPT, STRUCTURING_REQUEST, SYSTEM_PROMPT
from tools import OPEN_METEO_URL, TOOL_LIST, WEATHER_TOOL, fetch_weather_data

# Load .env from project root (one level above weather-backend/)
load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-2024-08-06")
OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", "30"))
WEATHER_API_URL = os.getenv("WEATHER_API_URL", OPEN_METEO_URL)
WEATHER_API_TIMEOUT = float(os.getenv("WEATHER_API_TIMEOUT", "10"))
CORRECT_MB_CONVERSION = os.getenv("CORRECT_MB_CONVERSION", "false").lower() in ("1", "true", "yes")

QUERY_REQUIRED = "Query is required"
TOOL_NAME = WEATHER_TOOL["function"]["name"]

logger = logging.getLogger(__name__)


def _make_chat_client() -> AsyncOpenAI:
    if not OPENAI_API_KEY:
        raise ConfigurationError("OPENAI_API_KEY environment variable is required")
    return AsyncOpenAI(api_key=OPENAI_API_KEY, timeout=OPENAI_TIMEOUT, max_retries=0)


def validate_query(query: str | None) -> str:
    if not query or not query.strip():
        raise QueryValidationError(QUERY_REQUIRED)
    return query


def _describe_errors(exc: ValidationError, limit: int = 3) -> str:
    problems = [
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in exc.errors()[:limit]
    ]
    return "; ".join(problems)


class WeatherAgent:
    """Answers one weather question with two model calls around one Open-Meteo fetch.

    The chat client and every setting are passed in at construction so a
    request never reads module state.
    """

    def __init__(
        self,
        chat_client: AsyncOpenAI,
        model: str = OPENAI_MODEL,
        weather_api_url: str = WEATHER_API_URL,
        weather_timeout: float = WEATHER_API_TIMEOUT,
        correct_mb_conversion: bool = CORRECT_MB_CONVERSION,
    ):
        self.chat_client = chat_client
        self.model = model
        self.weather_api_url = weather_api_url
        self.weather_timeout = weather_timeout
        self.correct_mb_conversion = correct_mb_conversion

    async def interpret(self, query: str) -> ToolInvocation | str:
        """Ask the model whether the query needs weather data.

        Returns the parsed tool arguments, or the model's direct answer.
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": query},
        ]
        try:
            response = await self.chat_client.chat.completions.create(
                model=self.model,
                messages=messages,
                tools=TOOL_LIST,
                tool_choice="auto",
            )
        except Exception as exc:
            logger.error("LLM call failed (interpret): %s", exc)
            raise UpstreamError("language model unavailable") from exc

        if not response.choices:
            logger.error("LLM returned no choices (interpret)")
            raise UpstreamError("language model returned no choices")

        message = response.choices[0].message
        tool_call = next(
            (call for call in message.tool_calls or [] if call.function.name == TOOL_NAME),
            None,
        )
        if tool_call is None:
            return (message.content or "").strip() or FALLBACK_MESSAGE

        try:
            args = json.loads(tool_call.function.arguments)
            return ToolInvocation.model_validate(args)
        except (json.JSONDecodeError, TypeError, ValidationError) as exc:
            logger.error(
                "Malformed tool arguments: %r: %s",
                tool_call.function.arguments,
                exc,
            )
            raise UpstreamError("language model returned malformed tool arguments") from exc

    async def structure(self, query: str, reading: WeatherReading) -> StructuredResponse:
        messages = [
            {"role": "system", "content": STRUCTURING_PROMPT},
            {
                "role": "user",
                "content": STRUCTURING_REQUEST.format(
                    weather_json=reading.model_dump_json(), query=query
                ),
            },
        ]
        try:
            response = await self.chat_client.chat.completions.create(
                model=self.model,
                messages=messages,
                response_format=RESPONSE_FORMAT,
            )
        except Exception as exc:
            logger.error("LLM call failed (structure): %s", exc)
            raise UpstreamError("language model unavailable") from exc

        if not response.choices:
            logger.error("LLM returned no choices (structure)")
            raise UpstreamError("language model returned no choices")

        message = response.choices[0].message
        if message.refusal:
            logger.error("LLM refused to structure the reply: %s", message.refusal)
            raise UpstreamError(f"language model refused the request: {message.refusal}")
        if not message.content:
            logger.error("LLM returned empty content (structure)")
            raise UpstreamError("language model returned empty content")

        try:
            return StructuredResponse.model_validate_json(message.content)
        except ValidationError as exc:
            details = _describe_errors(exc)
            logger.error("Structured reply rejected: %s", details)
            raise SchemaError(f"structured reply does not match the response schema ({details})") from exc

    async def handle(self, query: str) -> WeatherReport | str:
        validate_query(query)
        logger.info("Weather query received: query=%r", query[:80])

        decision = await self.interpret(query)
        if isinstance(decision, str):
            logger.info("Direct answer, no tool call: reply=%r", decision[:120])
            return decision

        logger.info(
            "Tool invocation: location=%r, latitude=%s, longitude=%s",
            decision.location_name,
            decision.latitude,
            decision.longitude,
        )
        reading = await fetch_weather_data(
            decision,
            base_url=self.weather_api_url,
            timeout=self.weather_timeout,
            correct_mb_conversion=self.correct_mb_conversion,
        )
        structured = await self.structure(query, reading)

        logger.info(
            "Structured reply: location=%r, recommendations=%d",
            structured.weather_data.location,
            len(structured.recommendations),
        )
        return WeatherReport(data=structured, raw_weather=reading)
