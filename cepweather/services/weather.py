from __future__ import annotations

import json

import httpx
import structlog
from opentelemetry.context import Context
from opentelemetry.trace import SpanKind

from cepweather.config import get_settings
from cepweather.models.schemas import WeatherReport
from cepweather.observability.tracing import inject_headers, start_span
from cepweather.observability.upstream import instrument_upstream_call

logger = structlog.get_logger(__name__)


async def get_temperature_by_location(client: httpx.AsyncClient, location: str, *, ctx: Context) -> float:
    """Current temperature in Celsius for `location`.

    Only transport failures raise. A non-200 answer or a body without a
    numeric `current.temp_c` yields 0.0.
    """

    settings = get_settings()
    url = f"{settings.weather_base_url.rstrip('/')}/v1/current.json"
    headers = {
        "accept": "application/json",
        "Content-Type": "application/json",
        "key": settings.weather_api_key,
    }

    with start_span("weather-api", ctx, kind=SpanKind.CLIENT) as span_ctx:
        response = await instrument_upstream_call(
            upstream="weatherapi",
            fn=lambda: client.get(url, params={"q": location}, headers=inject_headers(span_ctx, headers)),
        )

    if response.status_code != 200:
        logger.warning(
            "weather_api_unexpected_status",
            status_code=response.status_code,
            body=response.text,
        )
        return 0.0

    try:
        payload = json.loads(response.content)
    except ValueError:
        logger.warning("weather_api_invalid_json", body=response.text)
        return 0.0

    return WeatherReport.temperature_from(payload)
