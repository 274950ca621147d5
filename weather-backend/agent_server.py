import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

import agent as agent_module
from agent import (
    OPENAI_MODEL,
    QUERY_REQUIRED,
    WEATHER_API_URL,
    WeatherAgent,
    _make_chat_client,
    validate_query,
)
from errors import AgentError, ConfigurationError, QueryValidationError, WeatherFetchError
from models import (
    ErrorResponse,
    HealthResponse,
    WeatherQueryRequest,
    WeatherQueryResponse,
    WeatherReport,
)

# Load .env from project root (one level above weather-backend/)
load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

_agent: WeatherAgent | None = None


def _get_agent() -> WeatherAgent:
    """Return the shared agent, building it on first use if startup could not."""
    global _agent
    if _agent is None:
        _agent = WeatherAgent(_make_chat_client())
        logger.info("Chat client initialized on first use.")
    return _agent


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _agent
    try:
        _agent = WeatherAgent(_make_chat_client())
        logger.info("Chat client initialized successfully.")
    except ConfigurationError as exc:
        logger.warning("Chat client not initialized: %s", exc)
    yield
    if _agent is not None:
        await _agent.chat_client.close()
        logger.info("Chat client closed.")


app = FastAPI(
    title="Weather Query Agent",
    description="Turns natural-language weather questions into structured weather reports.",
    version="1.0.0",
    lifespan=lifespan,
)


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


# ── Custom exception handlers ────────────────────────────────────────────────

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error(400, QUERY_REQUIRED)


# ── Endpoints ────────────────────────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        model=OPENAI_MODEL,
        weather_api_url=WEATHER_API_URL,
        api_key_configured=bool(agent_module.OPENAI_API_KEY),
    )


@app.post(
    "/weather-query",
    response_model=WeatherQueryResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def weather_query(request: WeatherQueryRequest):
    logger.info("Incoming POST /weather-query: query=%r", request.query[:80])

    try:
        validate_query(request.query)
        result = await _get_agent().handle(request.query)
    except QueryValidationError:
        return _error(400, QUERY_REQUIRED)
    except WeatherFetchError as exc:
        logger.error("WeatherFetchError in /weather-query: %s", exc)
        return _error(500, "Failed to fetch weather data", str(exc))
    except AgentError as exc:
        logger.error("%s in /weather-query: %s", type(exc).__name__, exc)
        return _error(500, "Internal server error", str(exc))
    except Exception:
        logger.error("Unexpected exception in /weather-query", exc_info=True)
        return _error(500, "Internal server error", "An unexpected error occurred.")

    if isinstance(result, WeatherReport):
        return WeatherQueryResponse(data=result.data, raw_weather=result.raw_weather)
    return WeatherQueryResponse(message=result)


if __name__ == "__main__":
    uvicorn.run(
        "agent_server:app",
        host="0.0.0.0",
        port=int(os.getenv("BACKEND_PORT", "8001")),
        reload=False,
    )
